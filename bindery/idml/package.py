"""
IDML package model.

An IDML file is a zip of XML parts: ``designmap.xml`` at the root points at
the resources, master spreads, spreads and stories, and
``META-INF/manifest.xml`` lists every part. ``IdmlPackage`` keeps each part as
an ElementTree element so renderers can build a skeleton once and then mutate
named frames and stories before serialising.
"""

import io
import logging
import zipfile
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

IDPKG_NS = "http://ns.adobe.com/AdobeInDesign/idml/1.0/packaging"
MIMETYPE = "application/vnd.adobe.indesign-idml-package"
DOM_VERSION = "8.0"

DESIGNMAP = "designmap.xml"
MANIFEST = "META-INF/manifest.xml"
CONTAINER = "META-INF/container.xml"
GRAPHIC = "Resources/Graphic.xml"
FONTS = "Resources/Fonts.xml"
STYLES = "Resources/Styles.xml"
PREFERENCES = "Resources/Preferences.xml"
MASTER_SPREAD = "MasterSpreads/MasterSpread_u1.xml"

ET.register_namespace("idPkg", IDPKG_NS)

# Unit square; frames are sized and placed through ItemTransform
_UNIT_SQUARE = ((0, 0), (0, 1), (1, 1), (1, 0))


def _pkg(tag: str) -> str:
    return f"{{{IDPKG_NS}}}{tag}"


def _num(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".")


def _path_geometry(parent: ET.Element, points: Sequence[Tuple[float, float]]):
    props = ET.SubElement(parent, "Properties")
    geometry = ET.SubElement(props, "PathGeometry")
    path = ET.SubElement(geometry, "GeometryPathType", PathOpen="false")
    array = ET.SubElement(path, "PathPointArray")
    for x, y in points:
        anchor = f"{_num(x)} {_num(y)}"
        ET.SubElement(array, "PathPointType", Anchor=anchor, LeftDirection=anchor, RightDirection=anchor)


class IdmlPackage:
    """Mutable set of IDML parts, written out as a zip by ``to_bytes``."""

    def __init__(self):
        self.parts: Dict[str, ET.Element] = {}
        self._spreads: List[str] = []
        self._stories: List[str] = []

    # -- skeleton ------------------------------------------------------------

    @classmethod
    def skeleton(cls, page_width: float, page_height: float, pages: int = 1, facing: bool = False) -> "IdmlPackage":
        """Empty document with swatch, font, style and preference parts. Sizes in points."""
        pkg = cls()
        pkg.parts[GRAPHIC] = ET.Element(_pkg("Graphic"), DOMVersion=DOM_VERSION)
        pkg.parts[FONTS] = ET.Element(_pkg("Fonts"), DOMVersion=DOM_VERSION)
        styles = ET.Element(_pkg("Styles"), DOMVersion=DOM_VERSION)
        group = ET.SubElement(styles, "RootParagraphStyleGroup", Self="u_paragraph_styles")
        ET.SubElement(group, "ParagraphStyle", Self="ParagraphStyle/$ID/NormalParagraphStyle", Name="$ID/NormalParagraphStyle")
        pkg.parts[STYLES] = styles

        prefs = ET.Element(_pkg("Preferences"), DOMVersion=DOM_VERSION)
        ET.SubElement(
            prefs,
            "DocumentPreference",
            PageWidth=_num(page_width),
            PageHeight=_num(page_height),
            PagesPerDocument=str(pages),
            FacingPages="true" if facing else "false",
        )
        ET.SubElement(prefs, "MarginPreference", ColumnCount="1", ColumnGutter="0", Top="0", Bottom="0", Left="0", Right="0")
        pkg.parts[PREFERENCES] = prefs

        master = ET.Element(_pkg("MasterSpread"), DOMVersion=DOM_VERSION)
        spread = ET.SubElement(master, "MasterSpread", Self="u1", Name="A-Master", ItemTransform="1 0 0 1 0 0")
        ET.SubElement(spread, "Page", Self="u1_page", GeometricBounds=f"0 0 {_num(page_height)} {_num(page_width)}",
                      ItemTransform="1 0 0 1 0 0")
        pkg.parts[MASTER_SPREAD] = master
        return pkg

    def add_swatch(self, name: str, rgb: Tuple[int, int, int]) -> str:
        swatch_id = f"Color/{name}"
        ET.SubElement(
            self.parts[GRAPHIC],
            "Color",
            Self=swatch_id,
            Name=name,
            Model="Process",
            Space="RGB",
            ColorValue=" ".join(str(v) for v in rgb),
        )
        return swatch_id

    def add_spread(self, spread_id: str, page_width: float, page_height: float) -> ET.Element:
        """Add a single-page spread; returns the Spread element to hang frames on."""
        path = f"Spreads/Spread_{spread_id}.xml"
        root = ET.Element(_pkg("Spread"), DOMVersion=DOM_VERSION)
        spread = ET.SubElement(root, "Spread", Self=spread_id, PageCount="1", ItemTransform="1 0 0 1 0 0")
        ET.SubElement(
            spread,
            "Page",
            Self=f"{spread_id}_page",
            AppliedMaster="u1",
            GeometricBounds=f"0 0 {_num(page_height)} {_num(page_width)}",
            ItemTransform="1 0 0 1 0 0",
        )
        self.parts[path] = root
        self._spreads.append(path)
        return spread

    def add_rectangle(self, spread: ET.Element, name: str) -> ET.Element:
        frame_id = f"{spread.get('Self')}_{name}"
        rect = ET.SubElement(spread, "Rectangle", Self=frame_id, Name=name, ItemTransform="1 0 0 1 0 0",
                             FillColor="Swatch/None", StrokeWeight="0")
        _path_geometry(rect, _UNIT_SQUARE)
        return rect

    def add_text_frame(self, spread: ET.Element, name: str, story_id: str) -> ET.Element:
        frame = ET.SubElement(spread, "TextFrame", Self=f"{spread.get('Self')}_{name}", Name=name,
                              ParentStory=story_id, ItemTransform="1 0 0 1 0 0")
        _path_geometry(frame, _UNIT_SQUARE)
        self.add_story(story_id, "")
        return frame

    def add_story(self, story_id: str, text: str):
        path = f"Stories/Story_{story_id}.xml"
        root = ET.Element(_pkg("Story"), DOMVersion=DOM_VERSION)
        story = ET.SubElement(root, "Story", Self=story_id)
        para = ET.SubElement(story, "ParagraphStyleRange",
                             AppliedParagraphStyle="ParagraphStyle/$ID/NormalParagraphStyle")
        chars = ET.SubElement(para, "CharacterStyleRange")
        ET.SubElement(chars, "Content").text = text
        self.parts[path] = root
        self._stories.append(path)

    # -- mutation ------------------------------------------------------------

    def set_frame(self, element: ET.Element, x: float, y: float, width: float, height: float,
                  fill: Optional[str] = None):
        """Size and place a frame; x/y is the top-left corner in points, Y down."""
        element.set("ItemTransform", f"{_num(width)} 0 0 {_num(height)} {_num(x)} {_num(y)}")
        if fill:
            element.set("FillColor", fill)

    def set_text_frame(self, element: ET.Element, x: float, y: float, width: float, height: float):
        # Text frames keep an unscaled transform so the type is not stretched
        element.set("ItemTransform", f"1 0 0 1 {_num(x)} {_num(y)}")
        array = element.find("Properties/PathGeometry/GeometryPathType/PathPointArray")
        for point, (px, py) in zip(array.findall("PathPointType"), _UNIT_SQUARE):
            anchor = f"{_num(px * width)} {_num(py * height)}"
            point.set("Anchor", anchor)
            point.set("LeftDirection", anchor)
            point.set("RightDirection", anchor)

    def set_story_text(self, story_id: str, text: str, index: int = 0):
        path = f"Stories/Story_{story_id}.xml"
        if path not in self.parts:
            logger.warning("IDML story '%s' not found", story_id)
            return
        contents = list(self.parts[path].iter("Content"))
        if index < len(contents):
            contents[index].text = text

    @property
    def preferences(self) -> ET.Element:
        return self.parts[PREFERENCES]

    # -- serialisation -------------------------------------------------------

    def _designmap(self) -> ET.Element:
        doc = ET.Element("Document", DOMVersion=DOM_VERSION, Self="d")
        ET.SubElement(doc, _pkg("Graphic"), src=GRAPHIC)
        ET.SubElement(doc, _pkg("Fonts"), src=FONTS)
        ET.SubElement(doc, _pkg("Styles"), src=STYLES)
        ET.SubElement(doc, _pkg("Preferences"), src=PREFERENCES)
        ET.SubElement(doc, _pkg("MasterSpread"), src=MASTER_SPREAD)
        for path in self._spreads:
            ET.SubElement(doc, _pkg("Spread"), src=path)
        for path in self._stories:
            ET.SubElement(doc, _pkg("Story"), src=path)
        return doc

    def _manifest(self, paths: Sequence[str]) -> ET.Element:
        manifest = ET.Element(_pkg("Manifest"))
        for path in paths:
            ET.SubElement(manifest, _pkg("FilePath"), src=path)
        return manifest

    def _container(self) -> ET.Element:
        ns = "urn:oasis:names:tc:opendocument:xmlns:container"
        container = ET.Element(f"{{{ns}}}container", version="1.0")
        rootfiles = ET.SubElement(container, f"{{{ns}}}rootfiles")
        ET.SubElement(rootfiles, f"{{{ns}}}rootfile", {"full-path": DESIGNMAP, "media-type": "text/xml"})
        return container

    def to_bytes(self) -> bytes:
        parts = dict(self.parts)
        parts[DESIGNMAP] = self._designmap()
        ordered = [DESIGNMAP] + [p for p in parts if p != DESIGNMAP]
        parts[MANIFEST] = self._manifest(ordered)
        parts[CONTAINER] = self._container()

        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            # The mimetype entry must come first and be stored uncompressed
            zf.writestr(zipfile.ZipInfo("mimetype"), MIMETYPE, compress_type=zipfile.ZIP_STORED)
            for path in ordered + [MANIFEST, CONTAINER]:
                xml = ET.tostring(parts[path], encoding="UTF-8", xml_declaration=True)
                zf.writestr(path, xml, compress_type=zipfile.ZIP_DEFLATED)
        return buf.getvalue()


def read_part(data: bytes, path: str) -> ET.Element:
    """Parse one XML part out of serialised IDML bytes."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return ET.fromstring(zf.read(path))
