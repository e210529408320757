"""
dirlens Mime: Nerd Font glyphs for listing entries.

Icons are looked up by the file extension (with its leading dot). Entries
without a known extension fall back to a category icon.
"""

from typing import Dict

from dirlens.core.constants import DEFAULT_CATEGORY, FOLDER_MIME

FILE_ICONS: Dict[str, str] = {
    ".7z": "\uf187",
    ".ai": "\ue7b4",
    ".apk": "\uf187",
    ".avi": "\uf008",
    ".bat": "\ue615",
    ".bmp": "\ue60d",
    ".bz2": "\uf187",
    ".c": "\ue61e",
    ".c++": "\ue61d",
    ".cab": "\uf187",
    ".cc": "\ue61d",
    ".clj": "\ue768",
    ".cljc": "\ue768",
    ".cljs": "\ue76a",
    ".coffee": "\ue61b",
    ".conf": "\ue615",
    ".cp": "\ue61d",
    ".cpio": "\uf187",
    ".cpp": "\ue61d",
    ".css": "\ue614",
    ".cxx": "\ue61d",
    ".d": "\ue7af",
    ".dart": "\ue798",
    ".db": "\ue706",
    ".deb": "\uf187",
    ".diff": "\ue728",
    ".dump": "\ue706",
    ".edn": "\ue76a",
    ".ejs": "\ue60e",
    ".epub": "\uf02d",
    ".erl": "\ue7b1",
    ".f#": "\ue7a7",
    ".fish": "\ue795",
    ".flac": "\uf001",
    ".flv": "\uf008",
    ".fs": "\ue7a7",
    ".fsi": "\ue7a7",
    ".fsscript": "\ue7a7",
    ".fsx": "\ue7a7",
    ".gem": "\uf187",
    ".gif": "\ue60d",
    ".go": "\ue627",
    ".gz": "\uf187",
    ".gzip": "\uf187",
    ".hbs": "\ue60f",
    ".hrl": "\ue7b1",
    ".hs": "\ue61f",
    ".htm": "\ue60e",
    ".html": "\ue60e",
    ".ico": "\ue60d",
    ".ini": "\ue615",
    ".java": "\ue738",
    ".jl": "\ue624",
    ".jpeg": "\ue60d",
    ".jpg": "\ue60d",
    ".js": "\ue60c",
    ".json": "\ue60b",
    ".jsx": "\ue7ba",
    ".less": "\ue614",
    ".lha": "\uf187",
    ".lhs": "\ue61f",
    ".log": "\uf1ea",
    ".lua": "\ue620",
    ".lzh": "\uf187",
    ".lzma": "\uf187",
    ".markdown": "\ue609",
    ".md": "\ue609",
    ".mkv": "\uf008",
    ".ml": "\u03bb",
    ".mli": "\u03bb",
    ".mov": "\uf008",
    ".mp3": "\uf001",
    ".mp4": "\uf008",
    ".mpeg": "\uf008",
    ".mpg": "\uf008",
    ".mustache": "\ue60f",
    ".ogg": "\uf001",
    ".pdf": "\uf1c1",
    ".php": "\ue608",
    ".pl": "\ue769",
    ".pm": "\ue769",
    ".png": "\ue60d",
    ".psb": "\ue7b8",
    ".psd": "\ue7b8",
    ".py": "\ue606",
    ".pyc": "\ue606",
    ".pyd": "\ue606",
    ".pyo": "\ue606",
    ".rar": "\uf187",
    ".rb": "\ue791",
    ".rc": "\ue615",
    ".rlib": "\ue7a8",
    ".rpm": "\uf187",
    ".rs": "\ue7a8",
    ".rss": "\ue619",
    ".scala": "\ue737",
    ".scss": "\ue603",
    ".sh": "\ue795",
    ".slim": "\ue60e",
    ".sln": "\ue70c",
    ".sql": "\ue706",
    ".styl": "\ue600",
    ".suo": "\ue70c",
    ".t": "\ue769",
    ".tar": "\uf187",
    ".tgz": "\uf187",
    ".ts": "\ue628",
    ".twig": "\ue61c",
    ".vim": "\ue7c5",
    ".vimrc": "\ue7c5",
    ".wav": "\uf001",
    ".xml": "\ue60e",
    ".xul": "\ue745",
    ".xz": "\uf187",
    ".yml": "\ue615",
    ".zip": "\uf187",
}

CATEGORY_ICONS: Dict[str, str] = {
    "folder/folder": "\ue5ff",
    "file/default": "\uf15c",
}


def icon_for(extension: str, is_dir: bool = False) -> str:
    """Return the glyph for an entry.

    Args:
        extension: Extension including the dot (".py"); may be empty
        is_dir: Directories always get the folder icon
    """
    if is_dir:
        return CATEGORY_ICONS[FOLDER_MIME]
    return FILE_ICONS.get(extension.lower(), CATEGORY_ICONS[DEFAULT_CATEGORY])
