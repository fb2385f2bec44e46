import math
from dataclasses import dataclass
from functools import cmp_to_key
from numbers import Number

import pandas as pd

# ============================================================
# LISTADOS: BÚSQUEDA -> ORDEN -> PAGINACIÓN
# ============================================================

ASC = "asc"
DESC = "desc"


@dataclass
class Page:
    rows: pd.DataFrame
    page: int
    total_pages: int
    total: int
    page_size: int

    @property
    def start(self):
        if self.total == 0:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end(self):
        return min(self.page * self.page_size, self.total)


@dataclass
class ListState:
    query: str = ""
    sort_key: str = None
    sort_dir: str = ASC
    page: int = 1
    page_size: int = 7

    def set_query(self, query):
        self.query = query
        self.page = 1

    def toggle_sort(self, key):
        if self.sort_key == key:
            self.sort_dir = DESC if self.sort_dir == ASC else ASC
        else:
            self.sort_key = key
            self.sort_dir = ASC


def as_frame(data):
    if isinstance(data, pd.DataFrame):
        return data
    return pd.DataFrame(list(data))


def _is_blank(value):
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def filter_rows(df, query, columns=None):
    df = as_frame(df)
    text = (query or "").strip().lower()
    if not text or df.empty:
        return df
    columns = list(columns) if columns is not None else list(df.columns)

    def matches(row):
        for col in columns:
            value = row[col]
            if _is_blank(value) or value == "":
                continue
            if text in str(value).lower():
                return True
        return False

    mask = df.apply(matches, axis=1)
    return df[mask.astype(bool)]


def compare_values(a, b):
    """
    Números numéricamente, textos sin distinguir mayúsculas; cualquier otra
    combinación (o vacíos) cuenta como igual.
    """
    if _is_blank(a):
        a = ""
    if _is_blank(b):
        b = ""
    if isinstance(a, bool) or isinstance(b, bool):
        return 0
    if isinstance(a, Number) and isinstance(b, Number):
        A, B = a, b
    elif isinstance(a, str) and isinstance(b, str):
        A, B = a.lower(), b.lower()
    else:
        return 0
    if A < B:
        return -1
    if A > B:
        return 1
    return 0


def sort_rows(df, key, direction=ASC):
    df = as_frame(df)
    if not key or key not in df.columns or len(df) < 2:
        return df
    sign = -1 if direction == DESC else 1
    values = df[key].tolist()
    order = sorted(
        range(len(values)),
        key=cmp_to_key(lambda i, j: sign * compare_values(values[i], values[j])),
    )
    return df.iloc[order]


def total_pages(total, page_size):
    return max(1, math.ceil(total / page_size))


def clamp_page(page, pages):
    return min(max(1, int(page)), pages)


def paginate(df, page, page_size):
    df = as_frame(df)
    if page_size < 1:
        raise ValueError("page_size debe ser positivo")
    total = len(df)
    pages = total_pages(total, page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return Page(
        rows=df.iloc[start:start + page_size],
        page=current,
        total_pages=pages,
        total=total,
        page_size=page_size,
    )


def run_pipeline(df, state, columns=None):
    filtered = filter_rows(df, state.query, columns)
    ordered = sort_rows(filtered, state.sort_key, state.sort_dir)
    result = paginate(ordered, state.page, state.page_size)
    state.page = result.page
    return result


# ============================================================
# PAGINADOR
# ============================================================

def page_window(current, pages, max_buttons=5):
    inicio = max(1, current - max_buttons // 2)
    fin = min(pages, inicio + max_buttons - 1)
    if fin - inicio + 1 < max_buttons:
        inicio = max(1, fin - max_buttons + 1)
    return list(range(inicio, fin + 1))


def range_label(page):
    return f"Mostrando {page.start} a {page.end} de {page.total}"
