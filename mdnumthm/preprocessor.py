"""Numbering of theorem-like environments and resolution of references to them."""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

log = logging.getLogger(__name__)

NAME = "numthm"

_REF_RE = re.compile(r"\{\{(?P<reftype>ref:|tref:|fref:)\s*(?P<label>.*?)\}\}")


@dataclass(frozen=True)
class Env:
    """An environment handled by the preprocessor."""

    key: str
    name: str
    emph: str


@dataclass
class LabelInfo:
    """What is needed to format a link to a labelled environment."""

    num_name: str
    path: PurePosixPath
    title: str | None = None

    def __post_init__(self) -> None:
        self.path = PurePosixPath(self.path)


def _default_envs() -> list[Env]:
    return [
        Env("thm", "Theorem", "**"),
        Env("lem", "Lemma", "**"),
        Env("prop", "Proposition", "**"),
        Env("def", "Definition", "**"),
        Env("rem", "Remark", "*"),
    ]


def _section_number(number: list[int] | None) -> str:
    if number is None:
        return ""
    if not number:
        return "0"
    return "".join(f"{n}." for n in number)


def iter_chapters(book: Mapping[str, Any] | list) -> Iterator[dict]:
    """Yield every chapter of a book, sub-chapters before their parent."""
    sections = book["sections"] if isinstance(book, Mapping) else book
    yield from _walk(sections)


def _walk(items: Iterable[Any]) -> Iterator[dict]:
    for item in items:
        if isinstance(item, Mapping) and "Chapter" in item:
            chapter = item["Chapter"]
            yield from _walk(chapter.get("sub_items") or [])
            yield chapter


@dataclass
class NumThmPreprocessor:
    """Numbers theorems, lemmas, etc. and resolves references to them."""

    envs: list[Env] = field(default_factory=_default_envs)
    with_prefix: bool = False
    unsupported_renderers: frozenset[str] = field(default_factory=frozenset)

    name = NAME

    def supports_renderer(self, renderer: str) -> bool:
        """Tell whether the preprocessor can run for ``renderer``; by default any can."""
        return renderer not in self.unsupported_renderers

    def run(self, book: dict) -> dict:
        """Number environments and resolve references in a book, in place."""
        refs: dict[str, LabelInfo] = {}

        for chapter in iter_chapters(book):
            path = chapter.get("path")
            if path is None:
                continue
            prefix = _section_number(chapter.get("number")) if self.with_prefix else ""
            for env in self.envs:
                chapter["content"] = find_and_replace_envs(
                    chapter["content"], prefix, path, env, refs
                )

        for chapter in iter_chapters(book):
            path = chapter.get("path")
            if path is None:
                continue
            chapter["content"] = find_and_replace_refs(chapter["content"], path, refs)

        return book


def preprocessor_from_config(config: Mapping[str, Any]) -> NumThmPreprocessor:
    """Build a preprocessor from the book configuration."""
    pre = NumThmPreprocessor()
    section = config.get("preprocessor", {}) if isinstance(config, Mapping) else {}
    section = section.get("numthm", {}) if isinstance(section, Mapping) else {}
    if not isinstance(section, Mapping):
        return pre

    prefix = section.get("prefix")
    if isinstance(prefix, bool):
        pre.with_prefix = prefix

    custom = section.get("custom_environments")
    if isinstance(custom, list):
        for entry in custom:
            if not isinstance(entry, list):
                continue
            if len(entry) < 3:
                raise ValueError(
                    f"custom environment {entry!r} needs a key, a name and an emphasis"
                )
            key, name, emph = entry[:3]
            if all(isinstance(value, str) for value in (key, name, emph)):
                pre.envs.append(Env(key, name, emph))
    return pre


def find_and_replace_envs(
    text: str,
    prefix: str,
    path: str | PurePosixPath,
    env: Env,
    refs: MutableMapping[str, LabelInfo],
) -> str:
    """Replace every ``{{key}}{label}[title]`` with a numbered header.

    Labels are recorded in ``refs``; a label already present is kept as is.
    """
    pattern = re.compile(
        r"\{\{" + env.key + r"\}\}(\{(?P<label>.*?)\})?(\[(?P<title>.*?)\])?"
    )
    counter = itertools.count(1)
    ref_path = PurePosixPath(path)

    def replace(match: re.Match[str]) -> str:
        num_name = f"{env.name} {prefix}{next(counter)}"
        label = match.group("label")
        title = match.group("title")
        anchor = ""
        if label is not None:
            if label in refs:
                log.warning("%s: Label `%s' already used", num_name, label)
            else:
                refs[label] = LabelInfo(num_name, ref_path, title)
            anchor = f'<a name="{label}"></a>\n'
        if title is not None:
            header = f"{env.emph}{num_name} ({title}).{env.emph}"
        else:
            header = f"{env.emph}{num_name}.{env.emph}"
        return anchor + header

    return pattern.sub(replace, text)


def find_and_replace_refs(
    text: str,
    chap_path: str | PurePosixPath,
    refs: Mapping[str, LabelInfo],
) -> str:
    """Replace ``{{ref: label}}``, ``{{tref: label}}`` and ``{{fref: label}}`` with links."""
    chapter = PurePosixPath(chap_path)

    def replace(match: re.Match[str]) -> str:
        label = match.group("label")
        info = refs.get(label)
        if info is None:
            log.warning("Unknown reference: %s", label)
            return "**[??]**"
        kind = match.group("reftype")
        if kind == "ref:":
            link_text = info.num_name
        elif kind == "tref:":
            link_text = info.title if info.title is not None else info.num_name
        elif info.title is not None:
            link_text = f"{info.num_name} ({info.title})"
        else:
            link_text = info.num_name
        rel_path = compute_rel_path(chapter, info.path)
        return f"[{link_text}]({rel_path}#{label})"

    return _REF_RE.sub(replace, text)


def compute_rel_path(
    chap_path: str | PurePosixPath, path_to_ref: str | PurePosixPath
) -> str:
    """Return the path of ``path_to_ref`` relative to the folder of ``chap_path``."""
    chapter = PurePosixPath(chap_path)
    target = PurePosixPath(path_to_ref)
    if chapter == target:
        return ""
    parts = _diff_parts(target, chapter.parent)
    if parts is None:
        raise ValueError(f"cannot express {target} relative to {chapter.parent}")
    return "/".join(parts)


def _diff_parts(path: PurePosixPath, base: PurePosixPath) -> list[str] | None:
    if path.is_absolute() != base.is_absolute():
        return list(path.parts) if path.is_absolute() else None

    ita = iter(path.parts)
    itb = iter(base.parts if str(base) != "." else ())
    comps: list[str] = []
    while True:
        a = next(ita, None)
        b = next(itb, None)
        if a is None and b is None:
            break
        if b is None:
            comps.append(a)
            comps.extend(ita)
            break
        if a is None:
            comps.append("..")
            comps.extend(".." for _ in itb)
            break
        if not comps and a == b:
            continue
        if b == "..":
            return None
        comps.append("..")
        comps.extend(".." for _ in itb)
        comps.append(a)
        comps.extend(ita)
        break
    return comps