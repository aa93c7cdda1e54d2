from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class Script(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    lang: str = 'painless'
    params: Optional[Dict[str, Any]] = None

    def compile(self) -> dict:
        return self.model_dump(exclude_none=True)
