"""Store entity: retail stores and locations owned by an organization."""

import copy
import logging
import re
from datetime import UTC, datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import TypeAdapter, ValidationError

from adminkit.entities.common import (
    EMAIL_PATTERN,
    address_field,
    description_field,
    fill_slug,
    name_field,
    reference_field,
    slug_field,
    slugify,
)
from adminkit.hooks.types import EntityHooks, HookContext
from adminkit.metadata.types import (
    EntityAction,
    EntityDefinition,
    FieldDefinition,
    FormSectionSpec,
    TenantRules,
    ValidationRules,
    system_fields,
)
from adminkit.schema.compiler import UTCDateTime
from adminkit.services.errors import EntityNotFoundError, EntityValidationError, FieldViolation

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")

_timestamp = TypeAdapter(UTCDateTime)

DEFAULT_SETTINGS: dict[str, Any] = {
    "currency": "USD",
    "timezone": "UTC",
    "inventory": {
        "lowStockThreshold": 10,
        "autoReorder": False,
    },
}


class StoreHooks(EntityHooks):
    async def before_create(
        self, ctx: HookContext, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        fill_slug(data)
        if not data.get("settings"):
            data["settings"] = copy.deepcopy(DEFAULT_SETTINGS)
        if isinstance(data.get("operatingHours"), dict):
            data["operatingHours"] = normalize_hours(data["operatingHours"])
        return data

    async def before_update(
        self, ctx: HookContext, id: str, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        if isinstance(data.get("slug"), str):
            data["slug"] = slugify(data["slug"])
        if isinstance(data.get("operatingHours"), dict):
            data["operatingHours"] = normalize_hours(data["operatingHours"])
        return data

    async def before_delete(self, ctx: HookContext, id: str, tenant_id: str | None) -> bool:
        # Active categories or items keep a store open
        where = {"storeId": id, "tenantId": tenant_id, "isActive": True}
        for child in ("category", "item"):
            if await ctx.client.delegate(child).count(where):
                return False
        return True


def normalize_hours(hours: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate a weekly schedule and zero-pad its times.

    Keys are lowercase weekday names. Each day is {open, close, isClosed};
    open and close are HH:MM and required unless the day is closed, and
    close must be later than open.

    Raises:
        EntityValidationError: With one violation per malformed day
    """
    result: dict[str, dict[str, Any]] = {}
    violations: list[FieldViolation] = []
    for day, spec in hours.items():
        field = f"operatingHours.{day}"
        if day not in WEEKDAYS:
            violations.append(FieldViolation(f"'{day}' is not a weekday", "INVALID_DAY", field))
            continue
        if not isinstance(spec, dict):
            violations.append(
                FieldViolation("Expected {open, close, isClosed}", "INVALID_HOURS", field)
            )
            continue

        is_closed = bool(spec.get("isClosed", False))
        entry: dict[str, Any] = {"isClosed": is_closed}
        times = {}
        for key in ("open", "close"):
            value = spec.get(key)
            match = TIME_PATTERN.match(value) if isinstance(value, str) else None
            if match:
                times[key] = f"{int(match.group(1)):02d}:{match.group(2)}"
            elif value is not None or not is_closed:
                violations.append(
                    FieldViolation(f"{key} must be a time in HH:MM format", "INVALID_TIME", field)
                )
        if not is_closed and len(times) == 2 and times["close"] <= times["open"]:
            violations.append(
                FieldViolation("close must be later than open", "INVALID_HOURS", field)
            )
        entry.update(times)
        result[day] = entry

    if violations:
        raise EntityValidationError("Invalid operating hours", violations)
    return result


def store_timezone(store: dict[str, Any]) -> tzinfo:
    name = (store.get("settings") or {}).get("timezone") or "UTC"
    if name == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Store %s has unknown timezone %r, using UTC", store.get("id"), name)
        return UTC


def hours_for(store: dict[str, Any], at: datetime) -> tuple[str, dict[str, Any] | None]:
    """The store-local weekday at a moment and that day's hours, if any."""
    local = at.astimezone(store_timezone(store))
    day = WEEKDAYS[local.weekday()]
    return day, (store.get("operatingHours") or {}).get(day)


def is_open(store: dict[str, Any], at: datetime) -> bool:
    """Whether a store is open at a moment, judged in the store's timezone."""
    day, hours = hours_for(store, at)
    if not hours or hours.get("isClosed") or not hours.get("open") or not hours.get("close"):
        return False
    now = at.astimezone(store_timezone(store)).strftime("%H:%M")
    return hours["open"] <= now < hours["close"]


def _parse_at(params: dict[str, Any]) -> datetime:
    if not params.get("at"):
        return datetime.now(UTC)
    try:
        return _timestamp.validate_python(params["at"])
    except ValidationError:
        raise EntityValidationError(
            "Invalid timestamp",
            [FieldViolation("at must be an ISO 8601 timestamp", "INVALID_DATE", "at")],
        ) from None


async def _find_store(service, params: dict[str, Any], tenant_id: str | None) -> dict[str, Any]:
    store = await service.find_by_id(params["id"], tenant_id)
    if store is None:
        raise EntityNotFoundError("store", params["id"])
    return store


async def store_hours(service, params: dict[str, Any], tenant_id: str | None) -> dict[str, Any]:
    store = await _find_store(service, params, tenant_id)
    day, hours = hours_for(store, _parse_at(params))
    return {"day": day, "hours": hours, "timezone": str(store_timezone(store))}


async def store_open(service, params: dict[str, Any], tenant_id: str | None) -> dict[str, Any]:
    store = await _find_store(service, params, tenant_id)
    at = _parse_at(params)
    return {"at": at.isoformat(), "isOpen": is_open(store, at)}


def definition() -> EntityDefinition:
    return EntityDefinition(
        name="store",
        display_name="Stores",
        description="Retail stores and locations",
        icon="store",
        color="orange",
        nav_section="Organization",
        fields=system_fields()
        + [
            name_field(placeholder="Enter store name"),
            slug_field(),
            description_field(),
            reference_field("organizationId", "Organization", required=True),
            address_field(),
            FieldDefinition(
                "phone", "text", nullable=True, validation=ValidationRules(max_length=20)
            ),
            FieldDefinition(
                "email",
                "text",
                nullable=True,
                searchable=True,
                validation=ValidationRules(pattern=EMAIL_PATTERN),
            ),
            FieldDefinition("settings", "object", nullable=True),
            FieldDefinition(
                "operatingHours",
                "object",
                nullable=True,
                description="Weekly schedule keyed by weekday: {open, close, isClosed}",
            ),
            FieldDefinition("metadata", "object", nullable=True),
        ],
        tenant_rules=TenantRules(
            required_fields=["name", "slug", "organizationId"],
            optional_fields=[
                "description", "address", "phone", "email", "settings", "operatingHours",
                "metadata",
            ],
            unique_constraints=["slug"],
            validation_rules={
                "name": ValidationRules(min_length=1, max_length=255),
                "email": ValidationRules(pattern=EMAIL_PATTERN),
            },
        ),
        hooks=StoreHooks(),
        actions=[
            EntityAction(
                "hours", "GET", "/{id}/hours", store_hours,
                description="Opening hours for the store-local day of ?at= (default now)",
            ),
            EntityAction(
                "open", "GET", "/{id}/open", store_open,
                description="Whether the store is open at ?at= (default now)",
            ),
        ],
        form_layout="two-column",
        form_sections=[
            FormSectionSpec("Basic Information", ["name", "slug", "description"]),
            FormSectionSpec("Contact", ["email", "phone", "address"]),
            FormSectionSpec("Hours", ["operatingHours"], collapsible=True),
            FormSectionSpec("Organization", ["organizationId"]),
            FormSectionSpec(
                "Advanced", ["settings", "metadata"], collapsible=True, default_expanded=False
            ),
        ],
        table_columns=["name", "slug", "email", "phone", "isActive", "createdAt"],
    )
