"""
In-memory stand-in for the parts of Illustrator's COM object model the hex build touches.

Collections are 1-based and callable like COM collections, items expose
GeometricBounds / Translate / Resize / Delete, and the application supports
Open, Copy, Paste, ExecuteMenuCommand("group") and DoJavaScript.
"""

from types import SimpleNamespace

import pytest

from hex_ops import RULER_CENTIMETERS


class FakeView(list):
    """Read-only COM-style collection."""

    @property
    def Count(self):
        return len(self)

    def __call__(self, i):
        return self[i - 1]


class FakeCollection:
    def __init__(self, owner=None, items=()):
        self.owner = owner
        self._items = []
        for it in items:
            self.add(it)

    @property
    def Count(self):
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def __call__(self, key):
        if isinstance(key, int):
            return self._items[key - 1]
        for it in self._items:
            if it.Name == key:
                return it
        raise KeyError(key)

    def add(self, item, front=False):
        item._parent = self
        if front:
            self._items.insert(0, item)
        else:
            self._items.append(item)
        return item

    def remove(self, item):
        self._items.remove(item)
        item._parent = None


class FakeItem:
    def __init__(self, type_name="PathItem", bounds=(0, 10, 10, 0), children=(), name=""):
        self.TypeName = type_name
        self.Name = name
        self._bounds = tuple(float(b) for b in bounds)
        self._parent = None
        self.Filled = False
        self.FillColor = None
        self.Stroked = True
        self.Locked = False
        self.Hidden = False
        self.deleted = False
        self.resized = []
        self._kids = FakeCollection(self, children)
        if type_name == "PathItem":
            self.Guides = False
        elif type_name == "CompoundPathItem":
            self.PathItems = self._kids
        else:
            self.PageItems = self._kids

    @property
    def GeometricBounds(self):
        if self._kids.Count:
            kids = list(self._kids)
            return (min(k.GeometricBounds[0] for k in kids), max(k.GeometricBounds[1] for k in kids),
                    max(k.GeometricBounds[2] for k in kids), min(k.GeometricBounds[3] for k in kids))
        return self._bounds

    @property
    def Layer(self):
        p = self._parent.owner
        while not isinstance(p, FakeLayer):
            p = p._parent.owner
        return p

    def Translate(self, dx, dy):
        if self._kids.Count:
            for k in self._kids:
                k.Translate(dx, dy)
            return
        l, t, r, b = self._bounds
        self._bounds = (l + dx, t + dy, r + dx, b + dy)

    def Resize(self, sx, sy):
        self.resized.append((sx, sy))
        l, t, r, b = self.GeometricBounds
        self._scale((l + r) / 2, (t + b) / 2, sx / 100.0, sy / 100.0)

    def _scale(self, cx, cy, fx, fy):
        if self._kids.Count:
            for k in self._kids:
                k._scale(cx, cy, fx, fy)
            return
        l, t, r, b = self._bounds
        self._bounds = (cx + (l - cx) * fx, cy + (t - cy) * fy, cx + (r - cx) * fx, cy + (b - cy) * fy)

    def Delete(self):
        self.deleted = True
        if self._parent is not None:
            self._parent.remove(self)

    def clone(self):
        c = FakeItem(self.TypeName, self._bounds, [k.clone() for k in self._kids], self.Name)
        if self.TypeName == "PathItem":
            c.Guides = self.Guides
        return c


class FakeLayer:
    def __init__(self, doc, name="Layer 1", items=()):
        self.doc = doc
        self.Name = name
        self.Locked = False
        self.Visible = True
        self._parent = None
        self.PageItems = FakeCollection(self, items)

    @property
    def GroupItems(self):
        return FakeView(it for it in self.PageItems if it.TypeName == "GroupItem")

    def Delete(self):
        if self.doc.Layers.Count == 1:
            raise RuntimeError("a document needs at least one layer")
        self.doc.Layers.remove(self)


class FakeLayers(FakeCollection):
    def Add(self):
        return self.add(FakeLayer(self.owner, f"Layer {self.Count + 1}"), front=True)


class FakeArtboard:
    def __init__(self, rect):
        self.ArtboardRect = tuple(rect)


class FakeDoc:
    def __init__(self, app, layers=(("Layer 1", ()),), artboard=(0, 0, 368.504, -963.78), name="Untitled"):
        self.app = app
        self.Name = name
        self.Layers = FakeLayers(self)
        for lname, items in layers:
            self.Layers.add(FakeLayer(self, lname, items))
        self.ActiveLayer = self.Layers(1) if self.Layers.Count else None
        self.Artboards = FakeView([FakeArtboard(artboard)])
        self.Selection = None
        self.Saved = True
        self.RulerOrigin = (0, 0)
        self.closed_with = None

    def Activate(self):
        self.app.ActiveDocument = self

    def SelectObjectsOnActiveArtboard(self):
        self.Selection = [it for lay in self.Layers for it in lay.PageItems]

    def Close(self, option):
        self.closed_with = option
        self.app.documents.remove(self)
        if self.app.ActiveDocument is self:
            self.app.ActiveDocument = self.app.documents[-1] if self.app.documents else None


class FakeDocuments:
    def __init__(self, app):
        self.app = app

    @property
    def Count(self):
        return len(self.app.documents)

    def AddDocument(self, profile, preset):
        doc = FakeDoc(self.app, artboard=(0, 0, preset.Width, -preset.Height), name="Untitled-1")
        doc.profile = profile
        doc.color_space = preset.ColorMode
        doc.units = preset.Units
        return self.app.open_doc(doc)


class FakePreferences:
    def __init__(self):
        self.booleans = {}

    def SetBooleanPreference(self, key, value):
        self.booleans[key] = value


class FakeApp:
    def __init__(self, files=None):
        self.files = dict(files or {})
        self.documents = []
        self.ActiveDocument = None
        self.clipboard = []
        self.scripts = []
        self.menu_commands = []
        self.dialog_reply = ""
        self.Preferences = FakePreferences()

    @property
    def Documents(self):
        return FakeDocuments(self)

    def open_doc(self, doc):
        self.documents.append(doc)
        doc.Activate()
        return doc

    def Open(self, path):
        if path not in self.files:
            raise OSError(f"cannot open {path}")
        return self.open_doc(self.files[path](self))

    def Copy(self):
        self.clipboard = [it.clone() for it in (self.ActiveDocument.Selection or [])]

    def Paste(self):
        doc = self.ActiveDocument
        doc.Selection = [doc.ActiveLayer.PageItems.add(it.clone(), front=True) for it in self.clipboard]

    def ExecuteMenuCommand(self, cmd):
        self.menu_commands.append(cmd)
        if cmd != "group":
            return
        doc = self.ActiveDocument
        sel = list(doc.Selection or [])
        if not sel:
            return
        home = sel[0]._parent
        group = FakeItem("GroupItem")
        for it in sel:
            it._parent.remove(it)
            group.PageItems.add(it)
        home.add(group, front=True)
        doc.Selection = [group]

    def DoJavaScript(self, script):
        self.scripts.append(script)
        if "showConfigDialog" in script:
            return self.dialog_reply
        return None

    @property
    def alerts(self):
        return [s for s in self.scripts if "alert(" in s]


def path(bounds, name=""):
    return FakeItem("PathItem", bounds, name=name)


def group(*children, name=""):
    return FakeItem("GroupItem", children=children, name=name)


def compound(*children, name=""):
    return FakeItem("CompoundPathItem", children=children, name=name)


def hex_pattern():
    """Four stacked hex rows in a group plus a compound cap on top; spans x 50..300, y -50..-900."""
    rows = [path((50, top, 300, top - 200)) for top in (-100, -300, -500, -700)]
    cap = compound(path((50, -50, 170, -100)), path((180, -50, 300, -100)))
    return [group(*rows, name="rows"), cap]


def single_layer_doc(items, name="asset", layer="Layer 1"):
    def factory(app):
        return FakeDoc(app, layers=((layer, [it.clone() for it in items]),), name=name)
    return factory


@pytest.fixture
def fake_app():
    return FakeApp()


@pytest.fixture
def source_doc(fake_app):
    guide = path((-20, 20, 400, -20))
    guide.Guides = True
    doc = FakeDoc(fake_app, layers=(("Layer 1", [path((0, 100, 200, 0), name="logo"), guide]),), name="sponsor.ai")
    return fake_app.open_doc(doc)


@pytest.fixture
def com_stubs(monkeypatch):
    """Plain stand-ins for the objects hex_maker dispatches by ProgID."""
    import hex_maker

    def preset(width_pt, height_pt, color_mode, units=RULER_CENTIMETERS):
        return SimpleNamespace(Width=width_pt, Height=height_pt, ColorMode=color_mode, Units=units)
    monkeypatch.setattr(hex_maker, "make_rgb_color", lambda rgb: ("RGB",) + tuple(rgb))
    monkeypatch.setattr(hex_maker, "make_document_preset", preset)


@pytest.fixture
def assets_folder(tmp_path):
    for name in ("HEX.eps", "HEX.svg", "MASURI TAB.svg", "GUIDES.svg"):
        (tmp_path / name).write_bytes(b"")
    return tmp_path
