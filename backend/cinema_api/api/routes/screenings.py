
from fastapi import APIRouter, Depends, Request, Response, status

from cinema_api.api.deps import JsonBody, SessionDep, check_accept, check_content
from cinema_api.schemas.screening import ScreeningView
from cinema_api.services import screenings as screenings_service

router = APIRouter(prefix="/naytokset", tags=["naytokset"])


@router.get(
    "",
    response_model=list[ScreeningView],
    dependencies=[Depends(check_accept)],
)
async def read_screenings(
    session: SessionDep,
    sort: str | None = None,
) -> list[ScreeningView]:
    return await screenings_service.list_screenings(session=session, sort=sort)


@router.post(
    "",
    response_model=ScreeningView,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(check_accept), Depends(check_content)],
)
async def create_screening(
    *,
    session: SessionDep,
    body: JsonBody,
    request: Request,
    response: Response,
) -> ScreeningView:
    screening = await screenings_service.create_screening(session=session, body=body)
    response.headers["Location"] = str(
        request.url_for("read_screening", screening_id=str(screening.id))
    )
    return screening


# The id stays a string here so that malformed ids get the 400 from the
# validator instead of FastAPI's 422.
@router.get(
    "/{screening_id}",
    response_model=ScreeningView,
    dependencies=[Depends(check_accept)],
)
async def read_screening(*, session: SessionDep, screening_id: str) -> ScreeningView:
    return await screenings_service.get_screening(session=session, raw_id=screening_id)


@router.put(
    "/{screening_id}",
    response_model=ScreeningView,
    dependencies=[Depends(check_accept), Depends(check_content)],
)
async def upsert_screening(
    *,
    session: SessionDep,
    screening_id: str,
    body: JsonBody,
) -> ScreeningView:
    return await screenings_service.upsert_screening(
        session=session,
        raw_id=screening_id,
        body=body,
    )


@router.delete(
    "/{screening_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_screening(*, session: SessionDep, screening_id: str) -> Response:
    await screenings_service.delete_screening(session=session, raw_id=screening_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
