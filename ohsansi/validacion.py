import re
from dataclasses import dataclass

from ohsansi.errores import ValidationError
from ohsansi.olimpistas import REQUIRED_FIELDS

# ============================================================
# VALIDACIÓN DE FORMULARIOS (campo -> regla)
# ============================================================

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
COMPLEMENTO_RE = re.compile(r"^[A-Z0-9Ñ-]{1,3}$")


@dataclass(frozen=True)
class FieldStatus:
    error: bool = False
    valid: bool = False
    message: str = None


UNTOUCHED = FieldStatus()


def _status(ok, message):
    return FieldStatus(error=not ok, valid=ok, message=None if ok else message)


def min_length(n, message):
    def check(v, values):
        return _status(len(v) >= n, message)
    return check


def required(message="Rellene los campos obligatorios."):
    return min_length(1, message)


def optional(v, values):
    return FieldStatus(error=False, valid=bool(v))


def email(v, values):
    return _status(bool(EMAIL_RE.match(v)), "Ingrese un correo válido.")


def complemento(v, values):
    if not v:
        return UNTOUCHED
    ok = bool(COMPLEMENTO_RE.match(v)) and v.count("-") <= 1
    return _status(ok, "Máx. 3 (A-Z/Ñ, 0-9, un guion).")


def password(v, values):
    if not 8 <= len(v) <= 30:
        return _status(False, "La contraseña debe tener entre 8 y 30 caracteres.")
    if not (re.search(r"[A-Z]", v) and re.search(r"[a-z]", v) and re.search(r"\d", v)):
        return _status(False, "Use mayúsculas, minúsculas y números.")
    return _status(True, None)


def same_as(other, message):
    def check(v, values):
        return _status(bool(v) and v == str(values.get(other, "")).strip(), message)
    return check


def int_range(low, high, message):
    def check(v, values):
        try:
            n = int(v)
        except (TypeError, ValueError):
            return _status(False, message)
        return _status(low <= n <= high, message)
    return check


def medal_count(v, values):
    try:
        n = int(v)
    except (TypeError, ValueError):
        return _status(False, "Mínimo 1 medalla")
    if n < 1:
        return _status(False, "Mínimo 1 medalla")
    return _status(n <= 100, "Máximo 100")


EVALUADOR_SCHEMA = {
    "nombre": min_length(3, "Ingrese su nombre en el campo"),
    "ap_paterno": min_length(3, "Ingrese su apellido paterno"),
    "ap_materno": min_length(3, "Ingrese su apellido materno"),
    "correo": email,
    "telefono": min_length(7, "Ingrese un teléfono válido (mín. 7 dígitos)."),
    "numero_documento": required("Ingrese la parte numerica de su documento de identidad"),
    "complemento_documento": complemento,
    "profesion": optional,
    "institucion": optional,
    "cargo": optional,
    "password": password,
    "confirmPassword": same_as("password", "Las contraseñas no coinciden."),
}

MEDALLAS_SCHEMA = {
    "oros": medal_count,
    "platas": medal_count,
    "bronces": medal_count,
    "notaMinAprobacion": int_range(1, 100, "Debe estar entre 1 y 100"),
}

OLIMPISTA_SCHEMA = {f: required("Campo obligatorio") for f in REQUIRED_FIELDS}

DEFAULT_RULE = required()


def field_status(schema, name, values, touched=None):
    if touched is not None and name not in touched:
        return UNTOUCHED
    v = str(values.get(name, "") or "").strip()
    rule = schema.get(name, DEFAULT_RULE)
    return rule(v, values)


def validate_form(schema, values, touched=None):
    names = list(schema) + [n for n in values if n not in schema]
    return {n: field_status(schema, n, values, touched) for n in names}


def has_errors(statuses):
    return any(s.error for s in statuses.values())


def ensure_valid(schema, values):
    statuses = validate_form(schema, values)
    errors = {n: s.message for n, s in statuses.items() if s.error}
    if errors:
        raise ValidationError(errors)
    return values


# ============================================================
# LIMPIEZA DE ENTRADAS
# ============================================================

def _name(value):
    value = re.sub(r"[^A-Za-zÁÉÍÓÚáéíóúÑñ\s]", "", value)
    value = re.sub(r"\s{2,}", " ", value)
    return value.lstrip()[:40]


SANITIZERS = {
    "correo": lambda v: re.sub(r"\s+", "", v)[:80],
    "password": lambda v: re.sub(r"\s", "", v)[:30],
    "confirmPassword": lambda v: re.sub(r"\s", "", v)[:30],
    "nombre": _name,
    "ap_paterno": _name,
    "ap_materno": _name,
    "institucion": _name,
    "profesion": _name,
    "cargo": _name,
    "telefono": lambda v: re.sub(r"[^0-9]", "", v)[:9],
    "numero_documento": lambda v: re.sub(r"[^0-9-]", "", v)[:10],
    "complemento_documento": lambda v: re.sub(r"[^A-Za-z0-9Ññ-]", "", v).upper()[:3],
}


def sanitize(name, value):
    value = "" if value is None else str(value)
    fn = SANITIZERS.get(name)
    return fn(value) if fn else value


def sanitize_form(values):
    return {k: sanitize(k, v) for k, v in values.items()}
