# -*- coding: utf-8 -*-
"""
hex_maker.py - builds the 13x34 cm sponsor hex document in Illustrator.

Usage:
    python hex_maker.py                                   (dialog inside Illustrator)
    python hex_maker.py '{"color": "Navy", "position": "Bottom Sponsor"}'
"""

from __future__ import annotations

import json
import os
import sys
import traceback
from typing import Any, Dict, NamedTuple, Optional, Tuple

from bounds_math import Rect
from hex_ops import (
    HexChoice,
    HexMakerError,
    apply_color,
    bounds_of,
    center_on_artboard,
    copy_source_artwork,
    get_app,
    group_items,
    group_layer_contents,
    hex_to_rgb,
    import_guides,
    import_svg_by_opening,
    items_of,
    make_document_preset,
    make_rgb_color,
    notify,
    position_at,
    position_relative,
    remove_empty_layers,
    remove_overlapping_paths,
    scale_to_fit,
    show_config_dialog,
    union_bounds,
)

# --- Settings ---
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_PATH = os.path.join(BASE_DIR, "config.json")

DEFAULT_CONFIG: Dict[str, Any] = {
    "assets_folder": os.path.join(BASE_DIR, "assets"),
    "pipeline": "template",
    "default_color": "Black",
    "default_position": "",
}

# 13cm x 34cm
ARTBOARD_WIDTH_PT = 368.504
ARTBOARD_HEIGHT_PT = 963.78
CMYK = 2

SPONSOR_FIT_CM = (11, 8)

HEX_COLORS = {
    "Black": "#000000",
    "White": "#FFFFFF",
    "Navy": "#072441",
    "Yellow": "#FBBA00",
    "Pink": "#E14498",
    "Red": "#C42939",
    "Maroon": "#621122",
    "Green": "#6B9B38",
    "Lime Green": "#70BE46",
    "Emerald Green": "#00673A",
    "Bottle Green": "#00523F",
    "Light Blue": "#00B9ED",
    "Royal Blue": "#005EA3",
}


class PositionMode(NamedTuple):
    alignment: str                          # "bottom" | "middle"
    masuri_cm: Tuple[float, float]
    hex_cm: Optional[Tuple[float, float]] = None


POSITIONS = {
    "template": {
        "Bottom Sponsor": PositionMode("bottom", (5.7281, 18.8218)),
        "Middle Sponsor": PositionMode("middle", (5.7281, 8.4713)),
    },
    "layered": {
        "Normal Hex Sponsor": PositionMode("bottom", (5.7135, 18.8111), (4.3313, 2.4895)),
        "Sweater Hex Sponsor": PositionMode("middle", (5.7135, 8.4606), (4.3313, 2.4895)),
    },
}

ASSETS = {
    "template": ("HEX.eps", "MASURI TAB.svg", "GUIDES.svg"),
    "layered": ("HEX.svg", "MASURI TAB.svg", "GUIDES.svg"),
}

ARTWORK_LAYER_NAMES = ("Hex", "Layer 1", "Artwork")


# -----------------------------------------------------------
# Config
# -----------------------------------------------------------

def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config.update(json.load(f))
    except FileNotFoundError:
        pass
    except (OSError, ValueError) as e:
        print(f"!!! Could not read {path}, using defaults: {e}")
    if config.get("pipeline") not in POSITIONS:
        print(f"!!! Unknown pipeline '{config.get('pipeline')}', using 'template'")
        config["pipeline"] = "template"
    return config


def resolve_assets(folder: str, pipeline: str) -> Tuple[str, str, str]:
    paths = tuple(os.path.join(folder, name) for name in ASSETS[pipeline])
    for name, p in zip(ASSETS[pipeline], paths):
        if not os.path.exists(p):
            raise HexMakerError(f"{name} not found at: {os.path.abspath(p)}")
    return paths


def validate_choice(choice: HexChoice, pipeline: str) -> HexChoice:
    if choice.color not in HEX_COLORS:
        raise HexMakerError(f"Unknown hex color: {choice.color}")
    if choice.position not in POSITIONS[pipeline]:
        raise HexMakerError(f"Unknown sponsor position for {pipeline}: {choice.position}")
    return choice


def error_line(e: BaseException) -> Optional[int]:
    tb = traceback.extract_tb(e.__traceback__)
    return tb[-1].lineno if tb else None


# -----------------------------------------------------------
# Template pipeline (HEX.eps)
# -----------------------------------------------------------

def open_template(app, path: str):
    doc = app.Open(path)
    # keep the template from being overwritten: Save turns into Save As
    try:
        doc.Saved = False
    except Exception as e:
        print(f"   > Could not mark template unsaved: {e}")
    return doc


def find_artwork_layer(doc):
    layers = items_of(doc.Layers)
    if not layers:
        raise HexMakerError("Failed to find artwork layer: template has no layers")
    layer = next((l for l in layers if l.Name in ARTWORK_LAYER_NAMES), layers[0])
    layer.Name = "Artwork"
    return layer


def build_from_template(app, choice: HexChoice, assets: Tuple[str, str, str]):
    hex_path, masuri_path, guides_path = assets
    mode = POSITIONS["template"][choice.position]
    source_doc = app.ActiveDocument

    print(f"--- Opening template: {os.path.basename(hex_path)} ---")
    new_doc = open_template(app, hex_path)
    app.Preferences.SetBooleanPreference("showTransparencyGrid", True)
    artboard = Rect(*new_doc.Artboards(1).ArtboardRect)
    layer = find_artwork_layer(new_doc)
    hex_items = items_of(layer.PageItems)

    print("--- Copying sponsor artwork ---")
    sponsor_items = copy_source_artwork(app, source_doc, new_doc, layer)
    scale_to_fit(sponsor_items, *SPONSOR_FIT_CM)
    new_doc.Selection = None

    print(f"--- Coloring hex: {choice.color} ---")
    apply_color(hex_items, make_rgb_color(hex_to_rgb(HEX_COLORS[choice.color])))

    print(f"--- Importing {os.path.basename(masuri_path)} ---")
    masuri_items = import_svg_by_opening(app, masuri_path, new_doc, layer)

    print(f"--- Importing guides: {os.path.basename(guides_path)} ---")
    guides_layer = import_guides(app, guides_path, new_doc, artboard)
    group_layer_contents(app, new_doc, guides_layer)
    guides_layer.Locked = True

    sponsor = group_items(app, new_doc, sponsor_items, "Sponsor")
    hex_group = group_items(app, new_doc, hex_items, "Hex")
    masuri = group_items(app, new_doc, masuri_items, "Masuri Tab")

    # grouping moved items fails, so group first and position afterwards;
    # three groups do not select together, hence two steps
    if sponsor and hex_group and masuri:
        pair = group_items(app, new_doc, [sponsor, hex_group], "SponsorHex_Temp")
        if pair:
            group_items(app, new_doc, [pair, masuri], "Artwork")

    if sponsor and hex_group:
        position_relative([sponsor], [hex_group], mode.alignment)
        remove_overlapping_paths(items_of(hex_group.PageItems), bounds_of(sponsor))
        center_on_artboard([hex_group, sponsor], artboard)

    if masuri:
        position_at(masuri, artboard, *mode.masuri_cm)

    remove_empty_layers(new_doc)
    new_doc.Selection = None
    return new_doc


# -----------------------------------------------------------
# Layered pipeline (HEX.svg, one layer per part)
# -----------------------------------------------------------

def create_layered_document(app):
    preset = make_document_preset(ARTBOARD_WIDTH_PT, ARTBOARD_HEIGHT_PT, CMYK)
    doc = app.Documents.AddDocument("Print", preset)
    artboard = Rect(*doc.Artboards(1).ArtboardRect)
    doc.RulerOrigin = (artboard.left, artboard.top)
    default_layers = items_of(doc.Layers)
    # bottom to top: the last layer added ends up on top
    layers = {}
    for name in ("Sponsor", "Hex", "Masuri Tab"):
        lay = doc.Layers.Add()
        lay.Name = name
        layers[name] = lay
    for lay in default_layers:
        lay.Delete()
    return doc, artboard, layers


def group_and_center_layers(app, doc, layers, artboard: Rect):
    try:
        groups = []
        for lay in layers:
            if lay.GroupItems.Count > 0:
                groups.append(lay.GroupItems(1))
        if not groups: return None
        master = group_items(app, doc, groups, "Artwork")
        if master is None: return None
        master.Layer.Name = "Artwork"
        center_on_artboard([master], artboard)
        return master
    except HexMakerError:
        raise
    except Exception as e:
        raise HexMakerError(f"Failed to group and center layers: {e}") from e


def build_layered(app, choice: HexChoice, assets: Tuple[str, str, str]):
    hex_path, masuri_path, guides_path = assets
    mode = POSITIONS["layered"][choice.position]
    source_doc = app.ActiveDocument

    print("--- Creating 13x34 cm document ---")
    new_doc, artboard, layers = create_layered_document(app)
    sponsor_layer, hex_layer, masuri_layer = layers["Sponsor"], layers["Hex"], layers["Masuri Tab"]

    print("--- Copying sponsor artwork ---")
    sponsor_items = copy_source_artwork(app, source_doc, new_doc, sponsor_layer)
    scale_to_fit(sponsor_items, *SPONSOR_FIT_CM)
    new_doc.Selection = None

    print(f"--- Importing {os.path.basename(hex_path)} ---")
    import_svg_by_opening(app, hex_path, new_doc, hex_layer)
    apply_color(items_of(hex_layer.PageItems), make_rgb_color(hex_to_rgb(HEX_COLORS[choice.color])))

    position_relative(items_of(sponsor_layer.PageItems), items_of(hex_layer.PageItems), mode.alignment)
    remove_overlapping_paths(items_of(hex_layer.PageItems), union_bounds(items_of(sponsor_layer.PageItems)))

    print(f"--- Importing {os.path.basename(masuri_path)} ---")
    import_svg_by_opening(app, masuri_path, new_doc, masuri_layer)
    guides_layer = import_guides(app, guides_path, new_doc, artboard)

    for lay, name in ((sponsor_layer, "Sponsor"), (hex_layer, "Hex"), (masuri_layer, "Masuri Tab")):
        group_layer_contents(app, new_doc, lay, name)
    group_layer_contents(app, new_doc, guides_layer)
    guides_layer.Locked = True

    if hex_layer.GroupItems.Count > 0 and mode.hex_cm:
        position_at(hex_layer.GroupItems(1), artboard, *mode.hex_cm)
    if masuri_layer.GroupItems.Count > 0:
        position_at(masuri_layer.GroupItems(1), artboard, *mode.masuri_cm)

    group_and_center_layers(app, new_doc, [sponsor_layer, hex_layer, masuri_layer], artboard)
    remove_empty_layers(new_doc)
    new_doc.Selection = None
    return new_doc


PIPELINES = {
    "template": build_from_template,
    "layered": build_layered,
}


# -----------------------------------------------------------
# Entry point
# -----------------------------------------------------------

def run_hex_maker(choice: Optional[HexChoice] = None, config: Optional[Dict[str, Any]] = None, app=None) -> bool:
    config = config if config is not None else load_config()
    pipeline = config["pipeline"]
    if app is None:
        app = get_app()

    if app.Documents.Count == 0:
        notify(app, "Please open a document before running this script.")
        return False

    if choice is None:
        choice = show_config_dialog(app, list(HEX_COLORS), list(POSITIONS[pipeline]),
                                    config.get("default_color", ""), config.get("default_position", ""))
        if choice is None:
            print("--- Cancelled ---")
            return False

    try:
        validate_choice(choice, pipeline)
        assets = resolve_assets(config["assets_folder"], pipeline)
        print(f"Starting Hex: {choice.color} / {choice.position} ({pipeline})")
        PIPELINES[pipeline](app, choice, assets)
        notify(app, "Hex created successfully!")
        return True
    except Exception as e:
        traceback.print_exc()
        notify(app, f"Error: {e}\nLine: {error_line(e)}")
        return False


def parse_cli_choice(argv) -> Optional[HexChoice]:
    """`argv[1]`, when present, is a JSON object with "color" and "position"."""
    if len(argv) < 2:
        return None
    data = json.loads(argv[1])
    return HexChoice(str(data.get('color', '')), str(data.get('position', '')))


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    try:
        picked = parse_cli_choice(argv)
    except (ValueError, AttributeError) as e:
        print(f"Error: bad arguments: {e}")
        return 2
    return 0 if run_hex_maker(picked) else 1


if __name__ == "__main__":
    sys.stdout.reconfigure(encoding='utf-8')
    sys.exit(main())
