"""Entry-point for the IDML import pipeline."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from idml_importer.config import DEFAULT_LAYOUT, LAYOUTS, ImportOptions
from idml_importer.model.import_model import ImportResult
from idml_importer.parser.asset_resolver import AssetResolver, MappingAssetResolver
from idml_importer.parser.idml_loader import IdmlPackage, IdmlPackageError
from idml_importer.pipeline import ImportPipeline
from idml_importer.renderer.html_renderer import HtmlRenderer, RecordConsumer
from idml_importer.utils.debug import DebugDumper
from idml_importer.utils.logger import get_logger

LOGGER = get_logger(__name__)


def build_import_result(
    idml_path: Union[str, Path],
    options: Optional[ImportOptions] = None,
    asset_resolver: Optional[AssetResolver] = None,
) -> ImportResult:
    """Load an IDML package and run spread/story parsing, classification and image assignment."""
    package = IdmlPackage.load(idml_path)
    return ImportPipeline(options, asset_resolver).run(package)


def render_outputs(result: ImportResult, output_dir: Path, *, html: bool = True) -> None:
    """Write the HTML preview and the JSON debug dump."""
    output_dir.mkdir(parents=True, exist_ok=True)
    consumers: List[RecordConsumer] = [DebugDumper(output_dir / "debug")]
    if html:
        consumers.append(HtmlRenderer(output_dir / "import.html"))
    for consumer in consumers:
        consumer.render(result)


def parse_order(values: Sequence[str]) -> Dict[str, int]:
    """Turn ``["Story_u1=2", ...]`` into an order override mapping."""
    order: Dict[str, int] = {}
    for value in values:
        story_id, sep, position = value.partition("=")
        if not sep or not story_id.strip():
            raise ValueError(f"Order override must look like STORY_ID=N, got {value!r}")
        order[story_id.strip()] = int(position)
    return order


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import IDML spreads and stories into structured records")
    parser.add_argument("idml_file", help="Path to the input .idml file")
    parser.add_argument("--layout", choices=LAYOUTS, default=DEFAULT_LAYOUT, help="Target layout")
    parser.add_argument(
        "--order",
        action="append",
        default=[],
        metavar="ID=N",
        help="Order override for an info teaser story (repeatable)",
    )
    parser.add_argument("--media-index", help="JSON object mapping stored file paths to asset ids")
    parser.add_argument("--output", help="Directory to write generated artifacts")
    parser.add_argument("--no-html", action="store_true", help="Only write the JSON debug dump")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the IDML → import result → preview pipeline."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = ImportOptions(layout=args.layout, order=parse_order(args.order))
    except ValueError as exc:
        parser.error(str(exc))

    resolver = MappingAssetResolver.from_json(args.media_index) if args.media_index else None

    idml_path = Path(args.idml_file).resolve()
    LOGGER.info("Importing %s as %s", idml_path.name, options.layout)
    try:
        result = build_import_result(idml_path, options, resolver)
    except IdmlPackageError as exc:
        LOGGER.error("Import failed: %s", exc)
        return 1

    output_path = Path(args.output or idml_path.with_suffix("")).resolve()
    LOGGER.info("Rendering outputs into %s", output_path)
    render_outputs(result, output_path, html=not args.no_html)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
