from collections.abc import Collection


def parse_sort(raw: str | None, whitelist: Collection[str]) -> str:
    """
    Turn a sort query such as ``-showtime,movie_title`` into an ORDER BY clause.

    Each comma separated token names a field, optionally prefixed with ``-``
    for descending order. Tokens naming a field outside ``whitelist`` are
    dropped, so only whitelisted names ever reach the SQL text.

    Parameters:
        raw (str | None): The raw value of the ``sort`` query parameter.
        whitelist (Collection[str]): Field names that may be sorted by.
    Returns:
        str: ``"ORDER BY ..."`` or an empty string if no token survived.
    """
    if not raw:
        return ""

    terms: list[str] = []
    for token in raw.split(","):
        field = token.strip()
        descending = field.startswith("-")
        if descending:
            field = field[1:]

        if field not in whitelist:
            continue

        terms.append(f"{field} DESC" if descending else field)

    if not terms:
        return ""
    return "ORDER BY " + ", ".join(terms)
