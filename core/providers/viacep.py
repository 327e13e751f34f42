from __future__ import annotations

from typing import Any, Optional

from .base import HTTPProvider, ProviderError, ZipcodeNotFound
from ..abstractions import LocalityRecord, RequestContext
from ..entities import PostalCode


def _flagged_error(value: Any) -> bool:
    # ViaCEP answers 200 with {"erro": true} for well-formed unknown codes.
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


class ViaCEPClient(HTTPProvider):
    name = "viacep"
    default_base_url = "https://viacep.com.br/ws"

    def __init__(self, base_url: Optional[str] = None, return_type: str = "json", **kwargs) -> None:
        super().__init__(base_url or self.default_base_url, **kwargs)
        self.return_type = return_type

    def find(self, code: PostalCode, context: Optional[RequestContext] = None) -> LocalityRecord:
        log = self._logger(context)
        url = f"{self.base_url}/{code}/{self.return_type}"
        response = self._request("GET", url, context)

        if response.status_code == 404:
            log.info("viacep: zipcode not found cep=%s", code)
            raise ZipcodeNotFound(f"zipcode {code} not found")
        if response.status_code != 200:
            log.error("viacep: unexpected status cep=%s status=%s", code, response.status_code)
            raise ProviderError(f"unexpected status: {response.status_code}")

        data = self._json(response, log)
        if not isinstance(data, dict):
            log.error("viacep: unexpected payload cep=%s", code)
            raise ProviderError("unexpected payload")
        if _flagged_error(data.get("erro")):
            log.info("viacep: response flagged erro=true cep=%s", code)
            raise ZipcodeNotFound(f"zipcode {code} not found")

        record = LocalityRecord(
            cep=str(data.get("cep") or ""),
            street=str(data.get("logradouro") or ""),
            neighborhood=str(data.get("bairro") or ""),
            locality=str(data.get("localidade") or ""),
            state=str(data.get("uf") or ""),
            ibge=str(data.get("ibge") or ""),
        )
        log.info("viacep: lookup succeeded cep=%s localidade=%s uf=%s", code, record.locality, record.state)
        return record


__all__ = ["ViaCEPClient"]
