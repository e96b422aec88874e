import io
import tempfile
import zipfile

import pytest
import structlog
from docx import Document

NAMESPACES = (
    'xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" '
    'xmlns:mc="http://schemas.openxmlformats.org/markup-compatibility/2006" '
    'xmlns:wp="http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing" '
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture" '
    'xmlns:wps="http://schemas.microsoft.com/office/word/2010/wordprocessingShape" '
    'xmlns:asvg="http://schemas.microsoft.com/office/drawing/2016/SVG/main" '
    'xmlns:v="urn:schemas-microsoft-com:vml" '
    'xmlns:w14="http://schemas.microsoft.com/office/word/2010/wordml" '
    'mc:Ignorable="w14"'
)

COMMENT_PART_NAMES = [
    "word/comments.xml",
    "word/commentsExtended.xml",
    "word/commentsIds.xml",
    "word/commentsExtensible.xml",
]

_CT = "application/vnd.openxmlformats-officedocument.wordprocessingml"
_RT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
_COMMENT_PARTS = {
    "word/comments.xml": (f"{_CT}.comments+xml", f"{_RT}/comments"),
    "word/commentsExtended.xml": (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.commentsExtended+xml",
        "http://schemas.microsoft.com/office/2011/relationships/commentsExtended",
    ),
    "word/commentsIds.xml": (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.commentsIds+xml",
        "http://schemas.microsoft.com/office/2016/09/relationships/commentsIds",
    ),
    "word/commentsExtensible.xml": (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.commentsExtensible+xml",
        "http://schemas.microsoft.com/office/2018/08/relationships/commentsExtensible",
    ),
}


def document_xml(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f"<w:document {NAMESPACES}><w:body>{body}<w:sectPr/></w:body></w:document>"
    )


def build_docx(body: str, with_comments: bool = False, extra_rels: str = "") -> bytes:
    """
    Builds a minimal but valid .docx in memory around the given body markup.
    With with_comments=True, the four comment parts and their manifest
    entries are included.
    """
    overrides = [
        f'<Override PartName="/word/document.xml" ContentType="{_CT}.document.main+xml"/>'
    ]
    rels = [f'<Relationship Id="rId1" Type="{_RT}/styles" Target="styles.xml"/>']
    parts = {
        "word/document.xml": document_xml(body),
        "word/styles.xml": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
            '<w:styles xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"/>'
        ),
    }
    overrides.append(f'<Override PartName="/word/styles.xml" ContentType="{_CT}.styles+xml"/>')

    if with_comments:
        for i, (name, (content_type, reltype)) in enumerate(_COMMENT_PARTS.items(), start=10):
            overrides.append(f'<Override PartName="/{name}" ContentType="{content_type}"/>')
            target = name.split("/", 1)[1]
            rels.append(f'<Relationship Id="rId{i}" Type="{reltype}" Target="{target}"/>')
            parts[name] = (
                '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
                '<w:comments xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
                '<w:comment w:id="0" w:author="Reviewer"><w:p><w:r><w:t>Note</w:t></w:r></w:p></w:comment>'
                "</w:comments>"
            )

    parts["[Content_Types].xml"] = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        + "".join(overrides)
        + "</Types>"
    )
    parts["_rels/.rels"] = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        f'<Relationship Id="rId1" Type="{_RT}/officeDocument" Target="word/document.xml"/>'
        "</Relationships>"
    )
    parts["word/_rels/document.xml.rels"] = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        + "".join(rels)
        + extra_rels
        + "</Relationships>"
    )

    stream = io.BytesIO()
    with zipfile.ZipFile(stream, "w", zipfile.ZIP_DEFLATED) as z:
        for name, text in parts.items():
            z.writestr(name, text.encode("utf-8"))
    return stream.getvalue()


def read_entry(path, name: str) -> str:
    with zipfile.ZipFile(path) as z:
        return z.read(name).decode("utf-8")


@pytest.fixture
def make_docx(tmp_path):
    """Factory writing a synthetic .docx to tmp_path and returning its path."""

    def _make(body: str, name: str = "input.docx", **kwargs):
        path = tmp_path / name
        path.write_bytes(build_docx(body, **kwargs))
        return path

    return _make


@pytest.fixture
def simple_docx_path(tmp_path):
    """A plain document saved by python-docx."""
    doc = Document()
    doc.add_heading("Contract Agreement", 0)
    doc.add_paragraph("This is a simple contract.")
    doc.add_paragraph("The party of the first part shall be known as the Seller.")

    path = tmp_path / "simple.docx"
    doc.save(str(path))
    return path


@pytest.fixture
def isolated_tempdir(tmp_path, monkeypatch):
    """Redirects tempfile.mkdtemp so leftover working directories are visible."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch


@pytest.fixture(autouse=True)
def reset_structlog():
    """The CLI configures structlog against the captured stderr; undo that after each test."""
    yield
    structlog.reset_defaults()
