from datetime import datetime
import json

from pathlib import Path
from typing import Any, Self, Type

import msgspec


def ext_enc_hook(obj: Any) -> Any:
    '''
    Encoder hook so `Path` fields survive `to_dict()` / msgpack / json.

    '''
    match obj:
        case Path():
            return str(obj)

    raise NotImplementedError(f'Objects of type {type(obj)} are not supported')


def ext_dec_hook(type: Type, obj: Any) -> Any:
    '''
    Given a type in a struct definition, convert the natively decoded `obj`
    into it. Only `Path` needs help, everything else msgspec handles.

    '''
    if type is Path:
        return Path(obj)

    raise NotImplementedError(f'Objects of type {type} are not supported')


class _Struct:
    @classmethod
    def from_json(cls, s: str | bytes) -> Self:
        return msgspec.json.decode(s, type=cls, dec_hook=ext_dec_hook)

    @classmethod
    def convert(cls, obj: Any) -> Self:
        return msgspec.convert(obj, type=cls, dec_hook=ext_dec_hook)

    def to_dict(self) -> dict:
        return msgspec.to_builtins(self, enc_hook=ext_enc_hook)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), default=_json_default, **kwargs)


def _json_default(o: Any) -> Any:
    if isinstance(o, datetime):
        return o.isoformat()

    return str(o)


class FrozenStruct(msgspec.Struct, _Struct, frozen=True): ...
