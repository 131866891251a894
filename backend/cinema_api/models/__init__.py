from .hall import Hall, HallBase, HallCreate
from .movie import Movie, MovieBase, MovieCreate
from .screening import Screening, ScreeningBase

__all__ = [
    "Hall",
    "HallBase",
    "HallCreate",
    "Movie",
    "MovieBase",
    "MovieCreate",
    "Screening",
    "ScreeningBase",
]
