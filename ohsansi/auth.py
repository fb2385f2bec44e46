import base64
import json
import logging
import time

from ohsansi.errores import ApiError

logger = logging.getLogger(__name__)

# ============================================================
# SESIÓN GUARDADA EN EL ALMACENAMIENTO LOCAL
# ============================================================

K_TOKEN = "ohsansi/auth/token"
K_USER = "ohsansi/auth/user"
K_EXP = "ohsansi/auth/expAt"

DEFAULT_EXPIRES_IN = 7200

ROLE_LABELS = {
    "ADMINISTRADOR": "Administrador",
    "EVALUADOR": "Evaluador",
    "RESPONSABLE": "Responsable",
}


def role_label(rol):
    return ROLE_LABELS.get(rol or "", "")


def decode_jwt_exp(token):
    """Campo `exp` (segundos UNIX) del payload de un JWT, o None."""
    try:
        payload = token.split(".")[1]
    except (AttributeError, IndexError):
        return None
    payload += "=" * (-len(payload) % 4)
    try:
        data = json.loads(base64.urlsafe_b64decode(payload))
    except (ValueError, TypeError):
        return None
    exp = data.get("exp") if isinstance(data, dict) else None
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        return exp
    return None


class AuthStorage:
    def __init__(self, storage, clock=time.time):
        self.storage = storage
        self.clock = clock

    def save(self, token, user, expires_in=None):
        self.storage.set_item(K_TOKEN, token)
        self.storage.set_item(K_USER, json.dumps(user, ensure_ascii=False))

        exp_sec = decode_jwt_exp(token)
        if exp_sec is not None:
            exp_ms = int(exp_sec * 1000)
        else:
            seconds = expires_in if isinstance(expires_in, (int, float)) else DEFAULT_EXPIRES_IN
            exp_ms = int((self.clock() + seconds) * 1000)
        self.storage.set_item(K_EXP, str(exp_ms))

    def token(self):
        return self.storage.get_item(K_TOKEN)

    def user(self):
        raw = self.storage.get_item(K_USER)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            return None

    def expires_at_ms(self):
        raw = self.storage.get_item(K_EXP)
        if not raw:
            return None
        try:
            return float(raw)
        except ValueError:
            return None

    def is_expired(self, leeway=30):
        exp_ms = self.expires_at_ms()
        if not exp_ms:
            return False
        return self.clock() * 1000 >= exp_ms - leeway * 1000

    def is_logged_in(self):
        return bool(self.token()) and not self.is_expired()

    def auth_header(self):
        token = self.token()
        if not token or self.is_expired():
            return {}
        return {"Authorization": f"Bearer {token}"}

    def clear(self):
        for key in (K_TOKEN, K_USER, K_EXP):
            self.storage.remove_item(key)


# ============================================================
# LOGIN / LOGOUT CONTRA EL BACKEND
# ============================================================

class AuthApi:
    def __init__(self, client, auth_storage):
        self.client = client
        self.auth = auth_storage

    def login(self, correo, contrasena):
        r = self.client.post("/api/auth/login", {"correo": correo, "contrasena": contrasena})
        if not isinstance(r, dict) or not r.get("token") or not isinstance(r.get("user"), dict):
            raise ApiError("Respuesta de login inválida.", payload=r)
        self.auth.save(r["token"], r["user"], r.get("expiresIn"))
        logger.info("Sesión iniciada (%s)", r["user"].get("rol", ""))
        return r["user"]

    def me(self):
        return self.client.get("/api/auth/me")["user"]

    def logout(self):
        try:
            self.client.post("/api/auth/logout", {})
        finally:
            self.auth.clear()
