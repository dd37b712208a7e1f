from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from yonk_code_metacenter.codegen.generator import TEMPLATE_SUFFIX, GenerateParam
from yonk_code_metacenter.config import MetaCenterConfig, load_config
from yonk_code_metacenter.meta.center import MetaCenter
from yonk_code_metacenter.meta.models import Table


def run(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="metacenter",
        description="Metadata center - table metadata, code generation and search templates"
    )
    parser.add_argument("--config", help="Path to YAML config (default: $METACENTER_CONFIG)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    # DDL extraction
    ddl = sub.add_parser("ddl", help="Print the table extracted from a CREATE TABLE statement")
    ddl.add_argument("--file", required=True, help="Path to DDL file")
    ddl.add_argument("--dialect", help="sqlglot dialect (default from config: mysql)")

    # Search template
    es = sub.add_parser("es-template", help="Print the search index template for a table")
    es_source = es.add_mutually_exclusive_group(required=True)
    es_source.add_argument("--file", help="Path to DDL file")
    es_source.add_argument("--table", help="Table name in the metadata store")

    # Artifact generation
    gen = sub.add_parser("generate", help="Generate source artifacts")
    gen_source = gen.add_mutually_exclusive_group(required=True)
    gen_source.add_argument("--file", help="Path to DDL file")
    gen_source.add_argument("--table", help="Table name in the metadata store")
    gen_source.add_argument("--all", action="store_true", help="Every table in the metadata store")
    gen.add_argument("--output-dir", help="Output root directory (default from config: ./default)")
    gen.add_argument("--artifact", action="append", dest="artifacts",
                     help="Artifact to generate, repeatable (default from config: constants, model)")

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        logging.basicConfig(
            level=getattr(logging, config.logging.level),
            format=config.logging.format,
            stream=sys.stderr,
        )

        if args.cmd == "ddl" and args.dialect:
            config.ddl.dialect = args.dialect
        center = MetaCenter.from_config(config)

        if args.cmd == "ddl":
            table = center.parse_from_ddl(_read_ddl(args.file))
            print(table.model_dump_json(indent=2))
        elif args.cmd == "es-template":
            table = _load_table(center, args.file, args.table)
            print(center.to_search_template(table))
        elif args.cmd == "generate":
            if args.all:
                tables = center.get_all_tables()
            else:
                tables = [_load_table(center, args.file, args.table)]
            params = build_generate_params(config, args.output_dir, args.artifacts)
            written = center.generate_files(tables, params)
            for path in written:
                print(f"✓ {path}")
            print(f"Generated {len(written)} files for {len(tables)} tables")
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def build_generate_params(
    config: MetaCenterConfig,
    output_dir: str | None = None,
    artifacts: list[str] | None = None,
) -> list[GenerateParam]:
    """Build one GenerateParam per artifact name.

    A custom template is used when templates_dir holds <name>.py.j2;
    otherwise the built-in template of that name.
    """
    generation = config.generation
    params = []
    for name in artifacts or generation.artifacts:
        template_path = None
        if generation.templates_dir:
            candidate = Path(generation.templates_dir) / f"{name}{TEMPLATE_SUFFIX}"
            if candidate.exists():
                template_path = candidate
        params.append(GenerateParam(
            name=name,
            template_path=template_path,
            output_dir=output_dir or generation.output_dir,
            inject_params=generation.inject_params,
        ))
    return params


def _read_ddl(path: str) -> str:
    ddl_path = Path(path)
    if not ddl_path.exists():
        raise FileNotFoundError(f"DDL file not found: {ddl_path}")
    return ddl_path.read_text(encoding="utf-8")


def _load_table(center: MetaCenter, file: str | None, name: str | None) -> Table:
    if file:
        return center.parse_from_ddl(_read_ddl(file))

    table = center.get_table_by_name(name)
    if table is None:
        raise LookupError(f"Table not found in metadata store: {name}")
    return table


if __name__ == "__main__":
    run()
