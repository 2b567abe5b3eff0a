from fastapi import APIRouter, Depends, Query

from ....core.observability import record_option_mutation
from ....models.catalog import OPTION_KINDS
from ....schemas.options import (
    OptionBulkUpdateItem,
    OptionCreate,
    OptionIdList,
    OptionKindOut,
    OptionOut,
    OptionUpdate,
)
from ....services.options import OptionService
from ...deps import get_option_service, require_writer

router = APIRouter(prefix="/v1/options", tags=["options"])


@router.get("", response_model=list[OptionKindOut])
def list_option_kinds() -> list[OptionKindOut]:
    return [
        OptionKindOut(
            kind=kind.slug,
            label=kind.label,
            table=kind.table,
            id_type="integer" if kind.is_integer_keyed else "string",
            id_prefix=kind.id_prefix,
        )
        for kind in OPTION_KINDS
    ]


@router.get("/{kind}", response_model=list[OptionOut])
def list_options(
    include_deleted: bool = Query(False, description="Also return soft-deleted options"),
    service: OptionService = Depends(get_option_service),
) -> list[OptionOut]:
    rows = service.read_all_including_deleted() if include_deleted else service.read_all()
    return [OptionOut.from_record(r) for r in rows]


@router.post("/{kind}", response_model=OptionOut, status_code=201)
def create_option(
    payload: OptionCreate,
    service: OptionService = Depends(get_option_service),
    _: dict = Depends(require_writer),
) -> OptionOut:
    record = service.create(payload)
    record_option_mutation(service.kind.slug, "create")
    return OptionOut.from_record(record)


# Fixed sub-paths are declared before "/{kind}/{option_id}" so they win routing


@router.post("/{kind}/bulk", response_model=list[OptionOut], status_code=201)
def create_options(
    payload: list[OptionCreate],
    service: OptionService = Depends(get_option_service),
    _: dict = Depends(require_writer),
) -> list[OptionOut]:
    records = service.create_many(payload)
    record_option_mutation(service.kind.slug, "create", len(records))
    return [OptionOut.from_record(r) for r in records]


@router.post("/{kind}/lookup", response_model=list[OptionOut])
def lookup_options(
    payload: OptionIdList, service: OptionService = Depends(get_option_service)
) -> list[OptionOut]:
    return [OptionOut.from_record(r) for r in service.read_many(payload.ids)]


@router.patch("/{kind}/bulk", response_model=list[OptionOut])
def update_options(
    payload: list[OptionBulkUpdateItem],
    service: OptionService = Depends(get_option_service),
    _: dict = Depends(require_writer),
) -> list[OptionOut]:
    records = service.update_many(payload)
    record_option_mutation(service.kind.slug, "update", len(records))
    return [OptionOut.from_record(r) for r in records]


@router.post("/{kind}/bulk-delete", response_model=list[OptionOut])
def delete_options(
    payload: OptionIdList,
    service: OptionService = Depends(get_option_service),
    _: dict = Depends(require_writer),
) -> list[OptionOut]:
    records = service.soft_delete_many(payload.ids)
    record_option_mutation(service.kind.slug, "delete", len(records))
    return [OptionOut.from_record(r) for r in records]


@router.get("/{kind}/{option_id}", response_model=OptionOut)
def get_option(
    option_id: str, service: OptionService = Depends(get_option_service)
) -> OptionOut:
    return OptionOut.from_record(service.read_one(option_id))


@router.patch("/{kind}/{option_id}", response_model=OptionOut)
def update_option(
    option_id: str,
    payload: OptionUpdate,
    service: OptionService = Depends(get_option_service),
    _: dict = Depends(require_writer),
) -> OptionOut:
    record = service.update_one(option_id, payload)
    record_option_mutation(service.kind.slug, "update")
    return OptionOut.from_record(record)


@router.delete("/{kind}/{option_id}", status_code=204)
def delete_option(
    option_id: str,
    service: OptionService = Depends(get_option_service),
    _: dict = Depends(require_writer),
) -> None:
    # Soft delete; the row stays in the table with deleted_at set
    service.soft_delete(option_id)
    record_option_mutation(service.kind.slug, "delete")
    return None
