"""Client management tools."""

import re
from typing import Any

from mecenas.store.models import to_json_dict
from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import CLIENT_TYPES, opt_string, require_string

PESEL_FORMAT = re.compile(r"^\d{11}$")
NIP_FORMAT = re.compile(r"^\d{10}$")


def _normalize_nip(nip: str) -> str:
    return re.sub(r"[-\s]", "", nip)


def register(registry: ToolRegistry) -> None:
    """Register client tools on a registry."""

    @registry.tool(
        name="create_client",
        description="Utwórz nowego klienta w bazie",
        parameters=[
            ToolParameter("name", "string", "Imię i nazwisko / nazwa firmy", required=True),
            ToolParameter("type", "string", "Typ klienta", required=True, enum=list(CLIENT_TYPES)),
            ToolParameter("pesel", "string", "PESEL (osoby fizyczne)"),
            ToolParameter("nip", "string", "NIP (firmy)"),
            ToolParameter("email", "string", "Email kontaktowy"),
            ToolParameter("phone", "string", "Telefon kontaktowy"),
            ToolParameter("address", "string", "Adres"),
        ],
    )
    async def create_client(ctx: ToolContext, args: dict[str, Any]) -> Any:
        name = require_string(args, "name")
        if not name:
            raise ToolError("Imię/nazwa klienta jest wymagane.")
        client_type = opt_string(args, "type") or "osoba_fizyczna"
        if client_type not in CLIENT_TYPES:
            raise ToolError(f"Typ klienta musi być: {', '.join(CLIENT_TYPES)}")

        pesel = opt_string(args, "pesel")
        if pesel and not PESEL_FORMAT.match(pesel):
            raise ToolError("PESEL musi składać się z 11 cyfr.")
        nip = opt_string(args, "nip")
        if nip and not NIP_FORMAT.match(_normalize_nip(nip)):
            raise ToolError("NIP musi składać się z 10 cyfr.")

        client = ctx.store.create_client(
            name=name,
            type=client_type,
            pesel=pesel or None,
            nip=_normalize_nip(nip) if nip else None,
            email=opt_string(args, "email"),
            phone=opt_string(args, "phone"),
            address=opt_string(args, "address"),
        )
        return {"success": True, "client": to_json_dict(client)}

    @registry.tool(
        name="list_clients",
        description="Listuj klientów (opcjonalnie szukaj)",
        parameters=[
            ToolParameter("query", "string", "Fraza wyszukiwania (imię, PESEL, NIP, email)"),
        ],
    )
    async def list_clients(ctx: ToolContext, args: dict[str, Any]) -> Any:
        query = opt_string(args, "query")
        clients = ctx.store.search_clients(query) if query else ctx.store.list_clients()
        return {"clients": [to_json_dict(c) for c in clients], "count": len(clients)}

    @registry.tool(
        name="get_client",
        description="Pobierz szczegóły klienta",
        parameters=[ToolParameter("id", "string", "ID klienta", required=True)],
    )
    async def get_client(ctx: ToolContext, args: dict[str, Any]) -> Any:
        client_id = require_string(args, "id")
        if not client_id:
            raise ToolError("ID klienta jest wymagane.")
        client = ctx.store.get_client(client_id)
        if client is None:
            raise ToolError("Klient nie znaleziony")
        return to_json_dict(client)

    @registry.tool(
        name="update_client",
        description="Zaktualizuj dane klienta (imię, email, telefon, adres, notatki)",
        parameters=[
            ToolParameter("id", "string", "ID klienta", required=True),
            ToolParameter("name", "string", "Imię i nazwisko / nazwa"),
            ToolParameter("email", "string", "Adres email"),
            ToolParameter("phone", "string", "Numer telefonu"),
            ToolParameter("address", "string", "Adres"),
            ToolParameter("notes", "string", "Notatki"),
        ],
    )
    async def update_client(ctx: ToolContext, args: dict[str, Any]) -> Any:
        client_id = require_string(args, "id")
        if not client_id:
            raise ToolError("ID klienta jest wymagane.")
        if ctx.store.get_client(client_id) is None:
            raise ToolError("Klient nie znaleziony.")

        updates = {key: opt_string(args, key) for key in ("name", "email", "phone", "address", "notes") if key in args}
        updated = ctx.store.update_client(client_id, **updates)
        if updated is None:
            raise ToolError("Nie udało się zaktualizować klienta.")
        return {"success": True, "client": to_json_dict(updated)}

    @registry.tool(
        name="delete_client",
        description="Usuń klienta i wszystkie powiązane sprawy, dokumenty, terminy",
        parameters=[ToolParameter("id", "string", "ID klienta", required=True)],
    )
    async def delete_client(ctx: ToolContext, args: dict[str, Any]) -> Any:
        client_id = require_string(args, "id")
        if not client_id:
            raise ToolError("ID klienta jest wymagane.")
        if not ctx.store.delete_client(client_id):
            raise ToolError("Klient nie znaleziony.")
        return {"success": True, "message": "Klient i powiązane dane usunięte."}
