#!/usr/bin/env python3
"""
Unified Site Builder

Builds the entire site from content files using Jinja2 templates.

CONTENT SOURCES:
    content/*.md                → docs/*.html (static pages)
    data/references-data.bib    → docs/publications.html (full listing)
                                  + "Selected Publications" on the home page
    records/projects.yml        → docs/projects.html

TEMPLATES:
    templates/base.html                    - Common page structure
    templates/page.html                    - Generic content page
    templates/index.html                   - Home page with selected publications
    templates/publications.html            - Full publication listing
    templates/selected_publications.html   - Summary widget (partial)
    templates/projects.html                - Side projects

USAGE:
    python scripts/build_site.py                  # Build everything
    python scripts/build_site.py pages            # Build static pages only
    python scripts/build_site.py publications     # Build publications page only
    python scripts/build_site.py projects         # Build projects page only
    python scripts/build_site.py --bib other.bib  # Use another bibliography
"""

import argparse
from pathlib import Path

try:
    import yaml
except ImportError:
    print("Error: pyyaml not found. Run: pip install pyyaml")
    exit(1)

try:
    import markdown
except ImportError:
    print("Error: markdown not found. Run: pip install markdown")
    exit(1)

try:
    from jinja2 import Environment, FileSystemLoader, select_autoescape
    from markupsafe import Markup
except ImportError:
    print("Error: jinja2 not found. Run: pip install jinja2")
    exit(1)

from personal_site.bibliography import get_publications
from personal_site.formatting import format_publication


# ============================================================================
# CONFIGURATION
# ============================================================================

BASE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = BASE_DIR / "templates"
CONTENT_DIR = BASE_DIR / "content"
RECORDS_DIR = BASE_DIR / "records"
DATA_DIR = BASE_DIR / "data"
OUTPUT_DIR = BASE_DIR / "docs"

BIB_FILE = DATA_DIR / "references-data.bib"
PROJECTS_FILE = RECORDS_DIR / "projects.yml"

# Number of entries in the home page "Selected Publications" widget
DEFAULT_MAX_PUBLICATIONS = 3

# Initialize Jinja2 environment
env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(['html', 'xml'])
)

# Markdown converter
md_converter = markdown.Markdown(extensions=["fenced_code", "tables", "attr_list"])


# ============================================================================
# UTILITIES
# ============================================================================

def parse_frontmatter(content: str) -> tuple[dict, str]:
    """Extract YAML frontmatter and body from content."""
    if content.startswith("---"):
        parts = content.split("---", 2)
        if len(parts) >= 3:
            frontmatter = yaml.safe_load(parts[1])
            body = parts[2].strip()
            return frontmatter or {}, body
    return {}, content


def display_path(path: Path) -> str:
    """Path relative to the repository root when possible."""
    try:
        return str(Path(path).resolve().relative_to(BASE_DIR))
    except ValueError:
        return str(path)


def write_output(html: str, output_file: Path):
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(html)
    print(f"  → {display_path(output_file)}")


# ============================================================================
# PUBLICATIONS
# ============================================================================

def render_selected_publications(selected_keys=None, max_items=DEFAULT_MAX_PUBLICATIONS,
                                 bib_path: Path = BIB_FILE, base_path: str = "") -> Markup:
    """
    Render the "Selected Publications" widget.

    Returns an empty string when there is nothing to show, so the widget
    (heading included) disappears from the page.
    """
    publications = get_publications(bib_path, selected_keys=selected_keys, max_items=max_items)
    if not publications:
        return Markup("")

    template = env.get_template("selected_publications.html")
    html = template.render(
        base_path=base_path,
        publications=[format_publication(pub) for pub in publications],
    )
    return Markup(html)


def build_publications_page(bib_path: Path = BIB_FILE, output_dir: Path = OUTPUT_DIR) -> int:
    """Build docs/publications.html with every entry. Returns the entry count."""
    print("Building publications...")

    publications = get_publications(bib_path)

    template = env.get_template("publications.html")
    html = template.render(
        base_path="",
        title="Publications",
        active="publications",
        bib_path=display_path(bib_path),
        publications=[format_publication(pub, full_listing=True) for pub in publications],
    )

    write_output(html, Path(output_dir) / "publications.html")
    print(f"  {len(publications)} publications")
    return len(publications)


# ============================================================================
# PROJECTS
# ============================================================================

def load_projects(projects_file: Path = PROJECTS_FILE) -> list:
    """Read the project list from YAML; missing file means no projects."""
    projects_file = Path(projects_file)
    if not projects_file.exists():
        print(f"  ⚠ Warning: {display_path(projects_file)} not found")
        return []

    with open(projects_file, "r") as f:
        data = yaml.safe_load(f) or {}

    projects = []
    for project in data.get("projects") or []:
        projects.append(
            {
                "title": project.get("title", ""),
                "description": " ".join(str(project.get("description", "")).split()),
                "href": project.get("href", ""),
                "img_src": project.get("img_src", ""),
            }
        )
    return projects


def build_projects_page(projects_file: Path = PROJECTS_FILE, output_dir: Path = OUTPUT_DIR) -> int:
    """Build docs/projects.html. Returns the project count."""
    print("Building projects...")

    projects = load_projects(projects_file)

    template = env.get_template("projects.html")
    html = template.render(
        base_path="",
        title="Projects",
        active="projects",
        projects=projects,
    )

    write_output(html, Path(output_dir) / "projects.html")
    return len(projects)


# ============================================================================
# PAGE BUILDERS
# ============================================================================

def publication_options(frontmatter: dict) -> tuple[list | None, int]:
    """Summary widget settings from frontmatter: (citation keys, max entries)."""
    selected_keys = frontmatter.get("selected_publications")
    if isinstance(selected_keys, str):
        selected_keys = [selected_keys]
    elif selected_keys:
        selected_keys = [str(key) for key in selected_keys]

    max_items = frontmatter.get("max_publications")
    if max_items is None:
        max_items = DEFAULT_MAX_PUBLICATIONS
    return selected_keys, int(max_items)


def build_page(content_file: Path, output_file: Path, base_path: str = "",
               bib_path: Path = BIB_FILE):
    """Build a single page from markdown content."""
    content = content_file.read_text()
    frontmatter, body = parse_frontmatter(content)

    template_name = frontmatter.get("template", "page") + ".html"
    template = env.get_template(template_name)

    # Convert markdown body to HTML (but preserve raw HTML)
    md_converter.reset()
    html_content = md_converter.convert(body)

    context = dict(frontmatter)
    if template_name == "index.html":
        selected_keys, max_items = publication_options(frontmatter)
        context["selected_publications"] = render_selected_publications(
            selected_keys=selected_keys,
            max_items=max_items,
            bib_path=bib_path,
            base_path=base_path,
        )

    html = template.render(
        base_path=base_path,
        content=html_content,
        **context
    )

    write_output(html, output_file)
    return frontmatter


def build_static_pages(content_dir: Path = CONTENT_DIR, output_dir: Path = OUTPUT_DIR,
                       bib_path: Path = BIB_FILE):
    """Build all static pages from content/*.md"""
    print("Building static pages...")

    for md_file in sorted(Path(content_dir).glob("*.md")):
        output_file = Path(output_dir) / (md_file.stem + ".html")
        build_page(md_file, output_file, base_path="", bib_path=bib_path)


# ============================================================================
# MAIN
# ============================================================================

def build_all(bib_path: Path = BIB_FILE, output_dir: Path = OUTPUT_DIR):
    """Build entire site."""
    print("=" * 60)
    print("BUILDING SITE")
    print("=" * 60 + "\n")

    build_static_pages(output_dir=output_dir, bib_path=bib_path)
    print()

    build_publications_page(bib_path=bib_path, output_dir=output_dir)
    print()

    build_projects_page(output_dir=output_dir)
    print()

    print("=" * 60)
    print("BUILD COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Build the site from content, records and data files")
    parser.add_argument("command", nargs="?", choices=["pages", "publications", "projects"],
                        help="Build only one part of the site")
    parser.add_argument("--bib", type=Path, default=BIB_FILE,
                        help="Bibliography file (default: data/references-data.bib)")
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR,
                        help="Output directory (default: docs/)")
    args = parser.parse_args()

    if args.command == "pages":
        build_static_pages(output_dir=args.output, bib_path=args.bib)
    elif args.command == "publications":
        build_publications_page(bib_path=args.bib, output_dir=args.output)
    elif args.command == "projects":
        build_projects_page(output_dir=args.output)
    else:
        build_all(bib_path=args.bib, output_dir=args.output)
