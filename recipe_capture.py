import argparse
import json
import logging
import os
import re
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from recipe_extractor import DEFAULT_MODEL, RecipeExtractor
from recipe_models import ExtractedRecipe, ExtractionRules
from video_platforms import default_thumbnail

TEXT_SCHEME = "text://"


def read_source(source: str) -> str:
    if source.startswith(TEXT_SCHEME):
        return source[len(TEXT_SCHEME):]
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"Cannot read recipe text from {source}: {exc.strerror}")


def render_markdown(recipe: ExtractedRecipe, source_url: Optional[str]) -> str:
    md = [f"# {recipe.title}", ""]
    md.append(f"![{recipe.title}]({recipe.image})")
    md.append("")
    md.append(f"_Cuisine: {recipe.cuisine.value}_")
    if source_url:
        md.append(f"_Source: {source_url}_")
    md.append("")
    md.append("## 食材 / Ingredients")
    for ing in recipe.ingredients:
        md.append(f"- {ing}")
    md.append("")
    md.append("## 步骤 / Steps")
    for i, s in enumerate(recipe.steps, 1):
        md.append(f"{i}. {s}")
    md.append("")
    return "\n".join(md).strip() + "\n"


def markdown_filename(title: str) -> str:
    return re.sub(r"[\\/\x00]", "-", title)[:80] + ".md"


def load_rules(path: Optional[str]) -> Optional[ExtractionRules]:
    if not path:
        return None
    try:
        return ExtractionRules.from_json(path)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Invalid rules file {path}: {exc}")


def main(argv: Optional[List[str]] = None):
    load_dotenv()
    ap = argparse.ArgumentParser(description="Turn a pasted recipe post into a structured recipe.")
    ap.add_argument("source", help="Text file, '-' for stdin, or text://<recipe text>")
    ap.add_argument("--url", help="Source URL, used for the title fallback and video thumbnail")
    ap.add_argument("--image", help="Image URL for the recipe")
    ap.add_argument("--out-dir", default="./out", help="Output directory for Markdown files")
    ap.add_argument("--json", action="store_true", help="Print the recipe as JSON instead of writing Markdown")
    ap.add_argument("--use-gpt", action="store_true", help="Also ask GPT (if OPENAI_API_KEY is set) and keep the richer result")
    ap.add_argument("--rules", default=os.getenv("RECIPE_RULES_FILE"), help="JSON file overriding the keyword tables")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s"
    )

    text = read_source(args.source)
    extractor = RecipeExtractor(
        use_gpt=args.use_gpt,
        api_key=os.getenv("OPENAI_API_KEY"),
        model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
        rules=load_rules(args.rules)
    )
    image_url = args.image or default_thumbnail(args.url)
    recipe = extractor.build(text, image_url=image_url, source_url=args.url)

    if args.json:
        print(json.dumps(recipe.to_dict(), ensure_ascii=False, indent=2))
        return

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    md_path = out_dir / markdown_filename(recipe.title)
    with open(md_path, "w", encoding="utf-8") as f:
        f.write(render_markdown(recipe, args.url))

    print("Done.")
    print("Markdown:", md_path)


if __name__ == "__main__":
    main()
