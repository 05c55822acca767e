#!/usr/bin/env python3
"""
Operar o cofre de registros pela linha de comando.

Uso:
  python scripts/vault_cli.py add NAME VALUE
  python scripts/vault_cli.py list
  python scripts/vault_cli.py update ID NAME VALUE
  python scripts/vault_cli.py delete ID
  python scripts/vault_cli.py search KEYWORD
  python scripts/vault_cli.py sort [--field name|value|createdAt] [--order asc|desc]
  python scripts/vault_cli.py export | backup | stats
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Garantir que o pacote vault seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vault.core.log import setup_logging
from vault.domain.records import InvalidRecord, format_timestamp
from vault.repositories.json_storage import StorageError
from vault.services.vault_service import VaultService, create_vault_service


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Personal record vault")
    sub = ap.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a record")
    add.add_argument("name")
    add.add_argument("value")

    sub.add_parser("list", help="List records in creation order")

    upd = sub.add_parser("update", help="Replace name and value of a record")
    upd.add_argument("id", type=int)
    upd.add_argument("name")
    upd.add_argument("value")

    dele = sub.add_parser("delete", help="Delete a record")
    dele.add_argument("id", type=int)

    search = sub.add_parser("search", help="Search id, name and value")
    search.add_argument("keyword")

    sort = sub.add_parser("sort", help="List records sorted by a field")
    sort.add_argument("--field", default="name", choices=["name", "value", "createdAt"])
    sort.add_argument("--order", default="asc", choices=["asc", "desc"])

    sub.add_parser("export", help="Write export.txt")
    sub.add_parser("backup", help="Write a JSON backup")
    sub.add_parser("stats", help="Show vault statistics")
    return ap


async def run(args: argparse.Namespace, service: VaultService) -> None:
    cmd = args.command
    if cmd == "add":
        record = await service.add_record(args.name, args.value)
        print(f"Record added successfully! (ID: {record.id})")
    elif cmd == "list":
        records = await service.list_records()
        if not records:
            print("No records found.")
        for r in records:
            print(f"ID: {r.id} | {r.name} = {r.value}")
    elif cmd == "update":
        updated = await service.update_record(args.id, args.name, args.value)
        print("Record updated!" if updated else "Record not found.")
    elif cmd == "delete":
        deleted = await service.delete_record(args.id)
        print("Record deleted!" if deleted else "Record not found.")
    elif cmd == "search":
        results = await service.search_records(args.keyword)
        if not results:
            print("No records found.")
        else:
            print(f"Found {len(results)} matching record(s):")
            for i, r in enumerate(results, start=1):
                print(f"{i}. ID: {r.id} | {r.name}")
    elif cmd == "sort":
        for r in await service.sort_records(args.field, args.order):
            print(f"-> {r.name} = {r.value} ({format_timestamp(r.created_at) or 'N/A'})")
    elif cmd == "export":
        print(f"Data exported to {service.export_data()}")
    elif cmd == "backup":
        print(f"Backup: {service.create_backup()}")
    elif cmd == "stats":
        stats = await service.get_stats()
        print("Vault Statistics:")
        print("--------------------------")
        print(f"Total Records: {stats.total}")
        print(f"Last Modified: {stats.last_modified}")
        print(f"Longest Name: {stats.longest} ({stats.longest_len} characters)")
        print(f"Earliest Record: {stats.earliest}")
        print(f"Latest Record: {stats.latest}")


async def _main(argv: list[str] | None) -> None:
    args = build_parser().parse_args(argv)
    service = await create_vault_service()
    await run(args, service)


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    try:
        asyncio.run(_main(argv))
    except (InvalidRecord, StorageError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
