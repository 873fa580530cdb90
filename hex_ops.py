# -*- coding: utf-8 -*-

from __future__ import annotations

import json
from typing import List, NamedTuple, Optional, Sequence, Tuple

from bounds_math import (
    Rect,
    artboard_point,
    center_offset,
    cm_to_points,
    intersects,
    scale_factor_to_fit,
    sponsor_offset,
    top_left_offset,
    union,
)

# --- Global settings ---

DO_NOT_SAVE_CHANGES = 2
RULER_CENTIMETERS = 2
GUIDES_LAYER = "Guides"
GUIDES_OFFSET_CM = 0.5


class HexMakerError(Exception):
    """A step of the hex build failed; the message starts with "Failed to ..."."""


class HexChoice(NamedTuple):
    color: str
    position: str


def hex_to_rgb(h: Optional[str]) -> Tuple[int, int, int]:
    if not h: return (0, 0, 0)
    h = h.lstrip('#')
    if len(h) == 3:
        h = "".join(ch * 2 for ch in h)
    if len(h) != 6: return (0, 0, 0)
    try:
        return tuple(int(h[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return (0, 0, 0)


def run_jsx(app, s: str):
    """Runs a JSX snippet; a failing script is reported, not raised."""
    try:
        return app.DoJavaScript(s)
    except Exception as e:
        print(f"!!! JSX Error: {e}")
        return None


# --- JSX scripts ---

JSX_CONFIG_DIALOG = """
#target illustrator

function showConfigDialog(colors, positions, defColor, defPos) {
    var dialog = new Window("dialog", "Hex Document Configuration");
    dialog.orientation = "column";
    dialog.alignChildren = ["fill", "top"];

    var colorGroup = dialog.add("group");
    colorGroup.orientation = "row";
    colorGroup.add("statictext", undefined, "Hex Color:");
    var colorDropdown = colorGroup.add("dropdownlist", undefined, colors);
    colorDropdown.selection = defColor;
    colorDropdown.preferredSize.width = 200;

    var positionGroup = dialog.add("group");
    positionGroup.orientation = "row";
    positionGroup.add("statictext", undefined, "Sponsor Position:");
    var positionDropdown = positionGroup.add("dropdownlist", undefined, positions);
    positionDropdown.selection = defPos;
    positionDropdown.preferredSize.width = 200;

    var buttonGroup = dialog.add("group");
    buttonGroup.orientation = "row";
    buttonGroup.alignment = "center";
    buttonGroup.add("button", undefined, "OK", {name: "ok"});
    buttonGroup.add("button", undefined, "Cancel", {name: "cancel"});

    if (dialog.show() == 1) {
        return colorDropdown.selection.text + "|" + positionDropdown.selection.text;
    }
    return "";
}

showConfigDialog(%COLORS%, %POSITIONS%, %DEF_COLOR%, %DEF_POS%);
"""

JSX_ALERT = """
#target illustrator
alert(%MESSAGE%);
"""


# -------------------------
# Helpers
# -------------------------

def get_app():
    # pywin32 only exists on Windows
    import win32com.client
    return win32com.client.Dispatch("Illustrator.Application")


def make_rgb_color(rgb: Tuple[int, int, int]):
    import win32com.client
    c = win32com.client.Dispatch("Illustrator.RGBColor")
    c.Red, c.Green, c.Blue = rgb
    return c


def make_document_preset(width_pt: float, height_pt: float, color_mode: int, units: int = RULER_CENTIMETERS):
    import win32com.client
    p = win32com.client.Dispatch("Illustrator.DocumentPreset")
    # Units before the size
    p.Units = units
    p.Width = width_pt
    p.Height = height_pt
    p.ColorMode = color_mode
    return p


def items_of(collection) -> list:
    """COM collections are 1-based."""
    return [collection(i) for i in range(1, collection.Count + 1)]


def selection_of(doc) -> list:
    sel = doc.Selection
    return list(sel) if sel else []


def bounds_of(item) -> Rect:
    return Rect(*item.GeometricBounds)


def union_bounds(items) -> Optional[Rect]:
    return union(bounds_of(it) for it in items)


def translate_all(items, dx: float, dy: float):
    for it in items:
        it.Translate(dx, dy)


def notify(app, message: str):
    print(message)
    run_jsx(app, JSX_ALERT.replace("%MESSAGE%", json.dumps(message)))


# -------------------------
# Dialog
# -------------------------

def parse_dialog_result(raw, colors: Sequence[str], positions: Sequence[str]) -> Optional[HexChoice]:
    """Dialog reply is "color|position"; anything else means the user cancelled."""
    if not raw or not isinstance(raw, str) or "|" not in raw:
        return None
    color, position = raw.split("|", 1)
    if color not in colors or position not in positions:
        return None
    return HexChoice(color, position)


def show_config_dialog(app, colors: Sequence[str], positions: Sequence[str],
                       default_color: str = "", default_position: str = "") -> Optional[HexChoice]:
    colors = list(colors)
    positions = list(positions)
    def_c = colors.index(default_color) if default_color in colors else 0
    def_p = positions.index(default_position) if default_position in positions else 0

    s = JSX_CONFIG_DIALOG.replace("%COLORS%", json.dumps(colors))
    s = s.replace("%POSITIONS%", json.dumps(positions))
    s = s.replace("%DEF_COLOR%", str(def_c)).replace("%DEF_POS%", str(def_p))
    return parse_dialog_result(run_jsx(app, s), colors, positions)


# -------------------------
# Import (clipboard based)
# -------------------------

def paste_into(app, doc, layer) -> list:
    doc.Activate()
    layer.Locked = False
    doc.ActiveLayer = layer
    app.Paste()
    return selection_of(doc)


def _paste_from_file(app, path: str, target_doc, layer) -> list:
    src = app.Open(path)
    pasted = []
    try:
        src.SelectObjectsOnActiveArtboard()
        if selection_of(src):
            app.Copy()
            pasted = paste_into(app, target_doc, layer)
    finally:
        src.Close(DO_NOT_SAVE_CHANGES)
        target_doc.Activate()
    return pasted


def copy_source_artwork(app, source_doc, target_doc, layer) -> list:
    """Copies everything on the source's active artboard except guides."""
    try:
        source_doc.Activate()
        source_doc.SelectObjectsOnActiveArtboard()
        picked = [it for it in selection_of(source_doc) if not getattr(it, "Guides", False)]
        source_doc.Selection = picked
        if not picked:
            print("   > Source artboard is empty, no sponsor artwork")
            return []
        app.Copy()
        pasted = paste_into(app, target_doc, layer)
        print(f"   > Pasted {len(pasted)} sponsor items")
        return pasted
    except Exception as e:
        raise HexMakerError(f"Failed to copy source artwork: {e}") from e


def import_svg_by_opening(app, path: str, target_doc, layer) -> list:
    try:
        return _paste_from_file(app, path, target_doc, layer)
    except Exception as e:
        raise HexMakerError(f"Failed to import SVG: {e}") from e


def convert_to_guides(items):
    for it in items:
        t = it.TypeName
        if t == "PathItem":
            it.Guides = True
        elif t == "GroupItem":
            convert_to_guides(items_of(it.PageItems))
        elif t == "CompoundPathItem":
            convert_to_guides(items_of(it.PathItems))


def import_guides(app, path: str, target_doc, artboard: Rect):
    """New Guides layer holding the file's artwork, converted to guides."""
    try:
        layer = target_doc.Layers.Add()
        layer.Name = GUIDES_LAYER
        pasted = _paste_from_file(app, path, target_doc, layer)
        if pasted:
            # same offset for every position mode
            target = artboard_point(artboard, GUIDES_OFFSET_CM, GUIDES_OFFSET_CM)
            dx, dy = top_left_offset(union_bounds(pasted), target)
            translate_all(pasted, dx, dy)
            convert_to_guides(pasted)
        return layer
    except Exception as e:
        raise HexMakerError(f"Failed to import guides: {e}") from e


# -------------------------
# Geometry on live items
# -------------------------

def scale_to_fit(items, width_cm: float, height_cm: float):
    if not items: return
    try:
        factor = scale_factor_to_fit(union_bounds(items), cm_to_points(width_cm), cm_to_points(height_cm))
        for it in items:
            it.Resize(factor, factor)
        return factor
    except Exception as e:
        raise HexMakerError(f"Failed to scale selection: {e}") from e


def position_relative(sponsor_items, hex_items, alignment: str):
    """Moves the sponsor items as one block; no-op if either side is empty."""
    try:
        s = union_bounds(sponsor_items)
        h = union_bounds(hex_items)
        if s is None or h is None:
            return (0.0, 0.0)
        dx, dy = sponsor_offset(s, h, alignment)
        translate_all(sponsor_items, dx, dy)
        return (dx, dy)
    except Exception as e:
        raise HexMakerError(f"Failed to position sponsor: {e}") from e


def position_at(item, artboard: Rect, x_cm: float, y_cm: float):
    """Top-left of the item to (x_cm, y_cm) measured from the artboard's top-left."""
    try:
        dx, dy = top_left_offset(bounds_of(item), artboard_point(artboard, x_cm, y_cm))
        item.Translate(dx, dy)
    except Exception as e:
        raise HexMakerError(f"Failed to position {getattr(item, 'Name', 'group')}: {e}") from e


def center_on_artboard(items, artboard: Rect):
    try:
        r = union_bounds(items)
        if r is None: return
        dx, dy = center_offset(r, artboard)
        translate_all(items, dx, dy)
    except Exception as e:
        raise HexMakerError(f"Failed to center artwork: {e}") from e


# -------------------------
# Paths, colour, groups, layers
# -------------------------

def apply_color(items, color):
    """Fill every path (through groups and compound paths) and drop its stroke."""
    for it in items:
        t = it.TypeName
        if t == "PathItem":
            it.Filled = True
            it.FillColor = color
            it.Stroked = False
        elif t == "GroupItem":
            apply_color(items_of(it.PageItems), color)
        elif t == "CompoundPathItem":
            apply_color(items_of(it.PathItems), color)


def collect_paths(items, out: Optional[list] = None) -> list:
    if out is None:
        out = []
    for it in items:
        t = it.TypeName
        if t == "PathItem":
            out.append(it)
        elif t == "GroupItem":
            collect_paths(items_of(it.PageItems), out)
        elif t == "CompoundPathItem":
            # kept whole
            out.append(it)
    return out


def remove_overlapping_paths(items, sponsor_bounds: Optional[Rect]) -> int:
    if sponsor_bounds is None:
        return 0
    try:
        doomed = [p for p in collect_paths(items) if intersects(bounds_of(p), sponsor_bounds)]
        for p in doomed:
            p.Delete()
        print(f"   > Removed {len(doomed)} hex paths under the sponsor")
        return len(doomed)
    except Exception as e:
        raise HexMakerError(f"Failed to remove overlapping hex paths: {e}") from e


def group_items(app, doc, items, name: str):
    """Groups through the 'group' menu command and names the new group."""
    if not items: return None
    try:
        doc.Selection = None
        doc.Selection = list(items)
        group = None
        if selection_of(doc):
            app.ExecuteMenuCommand("group")
            sel = selection_of(doc)
            if sel:
                group = sel[0]
                group.Name = name
                group.Locked = False
                group.Hidden = False
        doc.Selection = None
        return group
    except Exception as e:
        raise HexMakerError(f"Failed to group {name}: {e}") from e


def group_layer_contents(app, doc, layer, name: str = ""):
    try:
        items = items_of(layer.PageItems)
        if not items: return None
        return group_items(app, doc, items, name or layer.Name)
    except HexMakerError:
        raise
    except Exception as e:
        raise HexMakerError(f"Failed to group layer contents: {e}") from e


def remove_empty_layers(doc) -> List[str]:
    removed = []
    for lay in reversed(items_of(doc.Layers)):
        try:
            if lay.PageItems.Count == 0:
                n = lay.Name
                lay.Delete()
                removed.append(n)
        except Exception as e:
            # cleanup never stops the run
            print(f"   > Could not remove layer: {e}")
    return removed
