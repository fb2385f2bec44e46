import csv
import io

from ohsansi.olimpistas import OLYMPIAN_HEADERS

# ============================================================
# CSV: ESCRITURA Y LECTURA
# ============================================================

BOM = "\ufeff"


def write_rows(rows):
    """
    Escribe filas de texto como CSV. Solo se entrecomillan los campos con
    coma, comilla o salto de línea; las comillas internas se duplican.
    """
    lines = []
    for row in rows:
        # "\r\n" como terminador hace que tanto \r como \n fuercen comillas
        buf = io.StringIO()
        writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
        writer.writerow(["" if c is None else str(c) for c in row])
        lines.append(buf.getvalue()[:-2])
    return "\n".join(lines)


def to_csv(records, headers=None):
    headers = list(headers or OLYMPIAN_HEADERS)
    body = [[r.get(h, "") for h in headers] for r in records]
    return write_rows([headers] + body)


def parse_csv(text):
    """Devuelve las filas como listas de strings, sin filas vacías."""
    if text.startswith(BOM):
        text = text[len(BOM):]
    reader = csv.reader(io.StringIO(text, newline=""), strict=False)
    return [row for row in reader if any(c.strip() for c in row)]


def decode_upload(data):
    """Bytes de un archivo subido -> texto (UTF-8, con respaldo latin-1)."""
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")
