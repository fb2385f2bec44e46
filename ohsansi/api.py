import json
import logging

import requests

from ohsansi.errores import ApiError

logger = logging.getLogger(__name__)

# ============================================================
# CLIENTE HTTP DEL BACKEND (JSON sobre REST)
# ============================================================

MESSAGE_KEYS = ("message", "mensaje_error", "mensaje", "error")


def try_parse_json(text):
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def error_message(data, response):
    if isinstance(data, dict):
        for key in MESSAGE_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    reason = f" - {response.reason}" if response.reason else ""
    return f"Error {response.status_code}{reason}."


class ApiClient:
    def __init__(self, base_url, session=None, auth=None, timeout=15):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.auth = auth
        self.timeout = timeout

    def url(self, path):
        if path.startswith("http"):
            return path
        return f"{self.base_url}{path if path.startswith('/') else '/' + path}"

    def request(self, method, path, body=None, params=None, files=None, token=None, headers=None):
        url = self.url(path)
        all_headers = {}
        if files is None:
            all_headers["Content-Type"] = "application/json"
        if self.auth is not None:
            all_headers.update(self.auth.auth_header())
        if token:
            all_headers["Authorization"] = f"Bearer {token}"
        all_headers.update(headers or {})

        logger.info("%s %s", method, path)
        try:
            response = self.session.request(
                method,
                url,
                headers=all_headers,
                data=json.dumps(body) if body is not None and files is None else None,
                params=params,
                files=files,
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.error("%s %s: tiempo de espera agotado", method, path)
            raise ApiError("Tiempo de espera agotado.")
        except requests.RequestException as e:
            logger.error("%s %s: %s", method, path, e)
            raise ApiError("No se pudo conectar con el servidor.")

        data = try_parse_json(response.text)

        if response.status_code == 401:
            if self.auth is not None:
                self.auth.clear()
            msg = data.get("message") if isinstance(data, dict) else None
            raise ApiError(
                msg or "Sesión expirada. Inicie sesión nuevamente.",
                status=401,
                payload=data,
            )

        failed = isinstance(data, dict) and data.get("ok") is False
        if not (200 <= response.status_code < 300) or failed:
            msg = error_message(data, response)
            logger.error("%s %s -> %s: %s", method, path, response.status_code, msg)
            raise ApiError(msg, status=response.status_code, payload=data)

        return data

    def get(self, path, **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path, body=None, **kwargs):
        return self.request("POST", path, body=body, **kwargs)

    def put(self, path, body=None, **kwargs):
        return self.request("PUT", path, body=body, **kwargs)

    def patch(self, path, body=None, **kwargs):
        return self.request("PATCH", path, body=body, **kwargs)

    def delete(self, path, **kwargs):
        return self.request("DELETE", path, **kwargs)
