"""Announcements MCP Server - MCP tools for keeping a morning-announcements deck tidy."""

from mcp.server.fastmcp import FastMCP, Context
import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any
import os
from pathlib import Path

# SDK imports
from announce_sdk.core.deck import AnnouncementSlide
from announce_sdk.core.fields import ParseFault, parse_notes
from announce_sdk.core.settings import LifecycleSettings
from announce_sdk.core.state import SessionState
from announce_sdk.core.updater import SlideUpdater, UpdateAlreadyRunning
from announce_sdk.core.workspace import Workspace, AssetMetadata
from announce_sdk.webscraping.qr import (
    NoLinksSelected,
    NoSelection,
    QRCodeClient,
    extract_links,
)

# Configure logging
logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("AnnouncementsMCP")

# Default configuration
DEFAULT_PROJECTS_DIR = "./projects"


def projects_dir() -> Path:
    return Path(os.getenv("ANNOUNCEMENTS_PROJECTS_DIR", DEFAULT_PROJECTS_DIR))


# ── Global State ────────────────────────────────────────────────────────

_session_state = SessionState()
_qr_client = QRCodeClient()


# ── Server Setup ────────────────────────────────────────────────────────

@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
    try:
        logger.info("AnnouncementsMCP server starting up")
        yield {}
    finally:
        if _session_state.workspace:
            _session_state.auto_save()
        logger.info("AnnouncementsMCP server shut down")


mcp = FastMCP("AnnouncementsMCP", lifespan=server_lifespan)


# ═══════════════════════════════════════════════════════════════════════
# PROJECT MANAGEMENT TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def create_project(ctx: Context, project_name: str, base_path: str = "") -> str:
    """Create a new announcements project with an empty deck.

    Parameters:
    - project_name: Name for the project (used as directory name)
    - base_path: Optional base directory (defaults to $ANNOUNCEMENTS_PROJECTS_DIR or ./projects/)
    """
    global _session_state
    base = Path(base_path) if base_path else projects_dir()
    project_path = base / project_name

    if project_path.exists():
        return f"Error: Project directory already exists at {project_path}"

    workspace = Workspace(project_name=project_name, root_path=project_path)
    workspace.initialize()

    _session_state = SessionState(workspace=workspace)
    _session_state.deck.title = project_name
    _session_state.auto_save()

    return json.dumps({
        "status": "created",
        "project_name": project_name,
        "path": str(project_path),
        "directories": ["assets/qr/"],
    }, indent=2)


@mcp.tool()
def load_project(ctx: Context, project_path: str) -> str:
    """Load an existing announcements project.

    Parameters:
    - project_path: Path to the project directory
    """
    global _session_state
    try:
        workspace = Workspace.load(Path(project_path))
        _session_state = SessionState(workspace=workspace)
        _session_state.load_deck_from_workspace()

        return json.dumps({
            "status": "loaded",
            "project_name": workspace.project_name,
            "path": str(workspace.root_path),
            "asset_count": len(workspace.assets),
            "slide_count": len(_session_state.deck.slides),
        }, indent=2)
    except Exception as e:
        return f"Error loading project: {str(e)}"


@mcp.tool()
def save_project(ctx: Context) -> str:
    """Save the current project state (deck and manifest)."""
    if not _session_state.workspace:
        return "Error: No project is currently open. Use create_project or load_project first."

    _session_state.auto_save()
    _session_state.workspace.save_manifest()
    return f"Project '{_session_state.workspace.project_name}' saved successfully."


@mcp.tool()
def get_project_status(ctx: Context) -> str:
    """Get the current project status including slide counts by lifecycle state."""
    counts = _count_slides_by_state()
    if not _session_state.workspace:
        return json.dumps({
            "project_loaded": False,
            "slide_count": len(_session_state.deck.slides),
            "slides_by_state": counts,
            "message": "No project loaded. Use create_project or load_project.",
        }, indent=2)

    ws = _session_state.workspace
    return json.dumps({
        "project_loaded": True,
        "project_name": ws.project_name,
        "path": str(ws.root_path),
        "slide_count": len(_session_state.deck.slides),
        "slides_by_state": counts,
        "asset_count": len(ws.assets),
        "undo_depth": len(_session_state.undo_stack),
    }, indent=2)


def _count_slides_by_state() -> dict:
    counts: dict[str, int] = {}
    for slide in _session_state.deck.slides:
        try:
            fields = parse_notes(slide.notes)
        except ParseFault:
            state = "unreadable"
        else:
            if fields.is_permanent:
                state = "permanent"
            elif fields.is_expired:
                state = "expired"
            elif fields.created is None:
                state = "fresh"
            else:
                state = "active"
        counts[state] = counts.get(state, 0) + 1
    return counts


# ═══════════════════════════════════════════════════════════════════════
# SLIDE TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def get_slides(ctx: Context) -> str:
    """List all slides with their IDs, positions, title snippets, and markers."""
    deck = _session_state.deck
    if not deck.slides:
        return "No slides yet. Use add_slide to add an announcement."
    return json.dumps(deck.to_summary(), indent=2)


@mcp.tool()
def get_slide(ctx: Context, slide_id: str) -> str:
    """Get full details of a specific slide, including its notes.

    Parameters:
    - slide_id: The ID of the slide to retrieve
    """
    slide = _session_state.deck.get(slide_id)
    if not slide:
        return f"Error: Slide '{slide_id}' not found."
    return json.dumps(slide.model_dump(), indent=2)


@mcp.tool()
def add_slide(ctx: Context, title: str, body: str = "", notes: str = "",
              position: int = None) -> str:
    """Add an announcement slide. It becomes "new" on the next update.

    Parameters:
    - title: Slide title
    - body: Body text (may contain links for add_qr_codes)
    - notes: Optional starting notes, e.g. "Permanent:yes" or "Expires:2024-06-01 08:00"
    - position: Optional index to insert at (defaults to the end)
    """
    _session_state.checkpoint(f"Add slide '{title}'")
    slide = _session_state.deck.add(
        AnnouncementSlide(title=title, body_text=body, notes=notes), index=position)
    _session_state.auto_save()
    return json.dumps({
        "status": "added",
        "slide": slide.model_dump(),
    }, indent=2)


@mcp.tool()
def edit_slide(ctx: Context, slide_id: str, title: str = None,
               body: str = None, notes: str = None) -> str:
    """Edit a slide's title, body text, or notes.

    Clearing the notes of an expired slide revives it on the next update.

    Parameters:
    - slide_id: The ID of the slide to edit
    - title: New title (optional)
    - body: New body text (optional)
    - notes: New notes text (optional)
    """
    slide = _session_state.deck.get(slide_id)
    if not slide:
        return f"Error: Slide '{slide_id}' not found."

    _session_state.checkpoint(f"Edit slide {slide_id}")

    if title is not None:
        slide.title = title
    if body is not None:
        slide.body_text = body
    if notes is not None:
        slide.notes = notes

    _session_state.auto_save()
    return json.dumps({
        "status": "updated",
        "slide": slide.model_dump(),
    }, indent=2)


@mcp.tool()
def duplicate_slide(ctx: Context, slide_id: str) -> str:
    """Duplicate a slide right after itself (the copy starts fresh on the next update).

    Parameters:
    - slide_id: The ID of the slide to copy
    """
    _session_state.checkpoint(f"Duplicate slide {slide_id}")

    copy = _session_state.deck.duplicate(slide_id)
    if not copy:
        return f"Error: Slide '{slide_id}' not found."

    _session_state.auto_save()
    return json.dumps({
        "status": "duplicated",
        "slide": copy.model_dump(),
    }, indent=2)


@mcp.tool()
def remove_slide(ctx: Context, slide_id: str) -> str:
    """Remove a slide from the deck.

    Parameters:
    - slide_id: The ID of the slide to remove
    """
    _session_state.checkpoint(f"Remove slide {slide_id}")

    if _session_state.deck.remove(slide_id):
        _session_state.auto_save()
        return f"Slide '{slide_id}' removed. {len(_session_state.deck.slides)} slides remaining."
    return f"Error: Slide '{slide_id}' not found."


@mcp.tool()
def move_slide(ctx: Context, slide_id: str, index: int) -> str:
    """Move a slide so it lands before the slide currently at ``index``.

    Parameters:
    - slide_id: The ID of the slide to move
    - index: Target index in the current order (use the slide count to move to the end)
    """
    _session_state.checkpoint(f"Move slide {slide_id} to {index}")

    try:
        moved = _session_state.deck.move(slide_id, index)
    except ValueError as e:
        return f"Error: {str(e)}"
    if not moved:
        return f"Error: Slide '{slide_id}' not found."

    _session_state.auto_save()
    return json.dumps({
        "status": "moved",
        "slides": _session_state.deck.to_summary(),
    }, indent=2)


@mcp.tool()
def reorder_slides(ctx: Context, slide_id_list: list[str]) -> str:
    """Reorder slides by providing the complete list of slide IDs in desired order.

    Parameters:
    - slide_id_list: List of all slide IDs in the new order
    """
    _session_state.checkpoint("Reorder slides")

    if _session_state.deck.reorder(slide_id_list):
        _session_state.auto_save()
        return json.dumps({
            "status": "reordered",
            "slides": _session_state.deck.to_summary(),
        }, indent=2)
    return "Error: The provided slide ID list doesn't match the current slides."


@mcp.tool()
def undo(ctx: Context) -> str:
    """Undo the last deck mutation (including an update run)."""
    description = _session_state.undo()
    if description:
        _session_state.auto_save()
        return f"Undone: {description}. Slide count: {len(_session_state.deck.slides)}"
    return "Nothing to undo."


# ═══════════════════════════════════════════════════════════════════════
# LIFECYCLE TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def update_all_slides(ctx: Context) -> str:
    """Update every slide: dates, "new" badges, expiry, copies, and zombie slides.

    This is what a daily scheduled run should call.
    """
    _session_state.checkpoint("Update all slides")
    try:
        report = SlideUpdater(_session_state.deck, _session_state.settings).run()
    except UpdateAlreadyRunning as e:
        _session_state.undo_stack.pop()
        return f"Error: {str(e)}"
    except Exception as e:
        logger.error(f"Update error: {str(e)}")
        return f"Error during update: {str(e)}"

    _session_state.last_report = report.to_dict()
    _session_state.auto_save()
    return json.dumps(_session_state.last_report, indent=2)


@mcp.tool()
def get_last_report(ctx: Context) -> str:
    """Get the report of the most recent update run."""
    if not _session_state.last_report:
        return "No update has run yet. Use update_all_slides first."
    return json.dumps(_session_state.last_report, indent=2)


@mcp.tool()
def configure_lifecycle(ctx: Context, expire_after_days: int = None,
                        highlight_days: int = None, friday_extra_days: int = None,
                        saturday_extra_days: int = None) -> str:
    """Change how long announcements stay new and how long until they expire.

    Parameters:
    - expire_after_days: Days from Created to Expires (default 7)
    - highlight_days: Days an item shows the "new" badge (default 1)
    - friday_extra_days: Extra highlight days for Friday items (default 2)
    - saturday_extra_days: Extra highlight days for Saturday items (default 1, 0 = legacy)
    """
    updates = {
        "expire_after_days": expire_after_days,
        "highlight_days": highlight_days,
        "friday_extra_days": friday_extra_days,
        "saturday_extra_days": saturday_extra_days,
    }
    updates = {k: v for k, v in updates.items() if v is not None}
    try:
        settings = LifecycleSettings(**{**_session_state.settings.model_dump(), **updates})
    except Exception as e:
        return f"Error: Invalid settings: {str(e)}"

    if _session_state.workspace:
        _session_state.workspace.settings = settings
        _session_state.workspace.save_manifest()
    else:
        _session_state.scratch_settings = settings

    return json.dumps({
        "status": "configured",
        "settings": settings.model_dump(include={
            "expire_after_days", "highlight_days", "friday_extra_days", "saturday_extra_days"}),
    }, indent=2)


# ═══════════════════════════════════════════════════════════════════════
# QR CODE TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def add_qr_codes(ctx: Context, slide_id: str, selection: str = None,
                 download: bool = False) -> str:
    """Insert a QR code on a slide for every link in the selected text.

    Parameters:
    - slide_id: The slide to put the QR codes on
    - selection: The selected text; defaults to the slide's body text
    - download: Also save the images into the project's assets/qr/ folder
    """
    slide = _session_state.deck.get(slide_id)
    if not slide:
        return f"Error: Slide '{slide_id}' not found."

    try:
        links = extract_links(selection if selection is not None else slide.body_text)
    except (NoSelection, NoLinksSelected) as e:
        return f"Error: {str(e)}"

    dest_dir = None
    if download:
        if not _session_state.workspace:
            return "Error: No project open. Use create_project first."
        dest_dir = _session_state.workspace.qr_dir

    _session_state.checkpoint(f"Add QR codes to slide {slide_id}")
    try:
        tiles = _qr_client.insert_qr_codes(slide, links, dest_dir=dest_dir)
    except Exception as e:
        _session_state.undo()
        logger.error(f"QR code error: {str(e)}")
        return f"Error adding QR codes: {str(e)}"

    if dest_dir is not None:
        for link, tile in zip(links, tiles):
            _session_state.workspace.register_asset(AssetMetadata(
                asset_id=tile.asset_id,
                filename=f"{tile.asset_id}.png",
                type="qr",
                source=link,
            ))

    _session_state.auto_save()
    return json.dumps({
        "status": "inserted",
        "links": links,
        "tiles": [t.model_dump() for t in tiles],
    }, indent=2)


# ═══════════════════════════════════════════════════════════════════════
# MCP PROMPT
# ═══════════════════════════════════════════════════════════════════════

@mcp.prompt()
def announcements_workflow() -> str:
    """Recommended workflow for running a morning-announcements deck"""
    return """You are helping the user keep a morning-announcements deck up to date.

1. **Open a Project**: Use create_project() or load_project().

2. **Add Announcements**: Use add_slide() for each announcement.
   - Put "Permanent:yes" in the notes for slides that should never expire.
   - Put "Expires:YYYY-MM-DD HH:MM" in the notes to pick an expiry date.

3. **Update**: Use update_all_slides(). It:
   - stamps new slides with Created, Highlight and Expires dates,
   - shows a "new" badge until Highlight passes,
   - marks slides past Expires as expired and moves them to the end,
   - resets copied slides so they start fresh,
   - moves expired slides dragged back into the live part ("zombies") behind it again.

4. **Review**: Use get_last_report() and get_slides().

Tips:
- To revive an expired slide, clear its notes with edit_slide() and move it back.
- Use add_qr_codes() to turn links in a slide into QR codes.
- Use undo() if an update did something unexpected.
"""


# ── Main ────────────────────────────────────────────────────────────────

def main():
    """Run the MCP server"""
    mcp.run()


if __name__ == "__main__":
    main()
