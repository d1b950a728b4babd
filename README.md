# mdnumthm

An mdBook preprocessor that numbers theorems, lemmas, propositions,
definitions and remarks, and turns references to them into links.

## Installation

```
pip install mdnumthm
```

This installs the `mdbook-numthm` command. Register it in your `book.toml`:

```toml
[preprocessor.numthm]
command = "mdbook-numthm"
```

## Writing environments

In a chapter, write

```
{{thm}}{thm:lagrange}[Lagrange Theorem]
```

and it becomes an anchor and a numbered header:

```
<a name="thm:lagrange"></a>
**Theorem 1 (Lagrange Theorem).**
```

Both the label `{...}` and the title `[...]` are optional; without a label
no anchor is written. The numbering restarts in each chapter and counts each
environment on its own. Draft chapters (chapters without a path) are left
untouched.

The environments available by default:

| key    | name        | emphasis |
|--------|-------------|----------|
| `thm`  | Theorem     | bold     |
| `lem`  | Lemma       | bold     |
| `prop` | Proposition | bold     |
| `def`  | Definition  | bold     |
| `rem`  | Remark      | italic   |

## References

Anywhere in the book:

- `{{ref: thm:lagrange}}` links with the numbered name, e.g. `Theorem 1`;
- `{{tref: thm:lagrange}}` links with the title, or the numbered name if there is no title;
- `{{fref: thm:lagrange}}` links with both, e.g. `Theorem 1 (Lagrange Theorem)`.

The link target is the labelled chapter's path relative to the folder of the
referring chapter, followed by `#label`; within the same chapter it is just
`#label`.

A reference to an unknown label is shown as **[??]** and a warning is
logged. If a label is used twice, the first use is kept for references, both
places get an anchor, and a warning is logged.

## Configuration

```toml
[preprocessor.numthm]
command = "mdbook-numthm"
# Prefix numbers with the chapter number, e.g. "Theorem 1.2.1"
prefix = true
# Extra environments: [key, name, emphasis delimiter]
custom_environments = [
    ["conj", "Conjecture", "**"],
    ["ex", "Example", "*"],
]
```

A custom environment entry with fewer than three items is an error; entries
whose first three items are not all strings are ignored.

## Command line

mdBook runs the command for you. It can also be checked by hand:

```
mdbook-numthm supports html
```

Every renderer is supported, so this exits with status 0. Called with no
subcommand, `mdbook-numthm` reads the `[context, book]` JSON pair that mdBook
sends on standard input and writes the processed book as JSON to standard
output. If the calling mdBook version does not satisfy `^0.4.35`, a warning
is printed to standard error and processing goes on. On malformed input an
error is printed to standard error and the exit status is 1.

`mdbook-numthm --version` prints the version.

## Use from Python

```python
from mdnumthm.preprocessor import NumThmPreprocessor, preprocessor_from_config

pre = preprocessor_from_config({"preprocessor": {"numthm": {"prefix": True}}})
book = pre.run(book)  # book: the JSON book object that mdBook sends; changed in place
```

The building blocks are available on their own as well:
`find_and_replace_envs`, `find_and_replace_refs`, `compute_rel_path`,
`iter_chapters`, and the `Env` and `LabelInfo` data classes in
`mdnumthm.preprocessor`; `version_matches`, `handle_preprocessing` and
`handle_supports` in `mdnumthm.cli`. Warnings go through the standard
`logging` module.