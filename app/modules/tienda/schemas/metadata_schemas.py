# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/schemas/metadata_schemas.py

Metadata tipada de compra: variante etiquetada por `kind`.

    {"kind": "rename_nickname",  "new_nickname": "..."}
    {"kind": "reclaim_nickname", "requested_nickname": "..."}

Los artículos credits, membership, reset_record y reset_stats no aceptan
metadata. `parse_purchase_metadata` valida exactamente la variante que
exige el artículo antes de cualquier escritura. Se aceptan las claves
legadas del frontend (nuevo_nickname, nickname_solicitado).

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.shared.utils.base_models import UTF8SafeModel
from app.modules.tienda.enums import ItemType, ServiceKind
from app.modules.tienda.exceptions import ValidationError

NICKNAME_MIN_LENGTH = 3
NICKNAME_MAX_LENGTH = 20
# Empieza con alfanumérico; luego letras, dígitos, guion bajo, punto o guion
NICKNAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$"

NicknameStr = Annotated[
    str,
    Field(
        min_length=NICKNAME_MIN_LENGTH,
        max_length=NICKNAME_MAX_LENGTH,
        pattern=NICKNAME_PATTERN,
    ),
]


class RenameNicknameMetadata(UTF8SafeModel):
    kind: Literal["rename_nickname"] = "rename_nickname"
    new_nickname: NicknameStr = Field(
        validation_alias=AliasChoices("new_nickname", "nuevo_nickname"),
    )


class ReclaimNicknameMetadata(UTF8SafeModel):
    kind: Literal["reclaim_nickname"] = "reclaim_nickname"
    requested_nickname: NicknameStr = Field(
        validation_alias=AliasChoices("requested_nickname", "nickname_solicitado"),
    )


PurchaseMetadata = Annotated[
    Union[RenameNicknameMetadata, ReclaimNicknameMetadata],
    Field(discriminator="kind"),
]

_METADATA_ADAPTER: TypeAdapter = TypeAdapter(PurchaseMetadata)


def required_metadata_kind(
    item_type: ItemType | str,
    service_kind: Optional[ServiceKind | str],
) -> Optional[ServiceKind]:
    """Variante de metadata que exige el artículo (None = no acepta metadata)."""
    if ItemType(item_type) != ItemType.SERVICE or service_kind is None:
        return None
    kind = ServiceKind(service_kind)
    if kind in (ServiceKind.RENAME_NICKNAME, ServiceKind.RECLAIM_NICKNAME):
        return kind
    return None


def parse_purchase_metadata(
    item_type: ItemType | str,
    service_kind: Optional[ServiceKind | str],
    raw: Optional[dict[str, Any]],
) -> Optional[RenameNicknameMetadata | ReclaimNicknameMetadata]:
    """
    Valida la metadata cruda contra la variante del artículo.

    Raises:
        ValidationError: metadata ausente, sobrante, de otra variante o mal formada
    """
    required = required_metadata_kind(item_type, service_kind)

    if required is None:
        if raw:
            raise ValidationError(
                "This item does not accept purchase metadata",
                code="unexpected_metadata",
            )
        return None

    if not raw:
        raise ValidationError(
            f"Purchase metadata is required for {required.value}",
            code="metadata_required",
        )

    data = dict(raw)
    kind = data.setdefault("kind", required.value)
    if kind != required.value:
        raise ValidationError(
            f"Metadata kind '{kind}' does not match item service '{required.value}'",
            code="metadata_kind_mismatch",
        )

    try:
        return _METADATA_ADAPTER.validate_python(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationError(
            f"Invalid purchase metadata ({field}): {first.get('msg')}",
            code="invalid_metadata",
        ) from exc


def dump_metadata(
    metadata: Optional[RenameNicknameMetadata | ReclaimNicknameMetadata],
) -> Optional[dict[str, Any]]:
    return metadata.model_dump() if metadata is not None else None


def load_metadata(
    raw: Optional[dict[str, Any]],
) -> Optional[RenameNicknameMetadata | ReclaimNicknameMetadata]:
    """Rehidrata la metadata ya normalizada que se guardó en la orden."""
    if not raw:
        return None
    return _METADATA_ADAPTER.validate_python(raw)


__all__ = [
    "NICKNAME_MIN_LENGTH",
    "NICKNAME_MAX_LENGTH",
    "NICKNAME_PATTERN",
    "RenameNicknameMetadata",
    "ReclaimNicknameMetadata",
    "PurchaseMetadata",
    "required_metadata_kind",
    "parse_purchase_metadata",
    "dump_metadata",
    "load_metadata",
]

# Fin del archivo backend/app/modules/tienda/schemas/metadata_schemas.py
