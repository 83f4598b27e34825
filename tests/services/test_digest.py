"""Tests for the digest compactor."""

from __future__ import annotations

from tests._fixtures.project_builder import FIXED_NOW, build_project, make_file
from vibeflow.services.aggregator import process_project
from vibeflow.services.digest import (
    MAX_DIGEST_CHARS,
    DigestCache,
    build_digest,
    content_key,
    find_entry_point,
    hash_string,
)


def test_hash_matches_shift_and_add_reference() -> None:
    assert hash_string("") == "0"
    assert hash_string("a") == "2p"  # 97 in base 36
    assert hash_string("ab") == "2e9"  # 97 * 31 + 98 = 3105
    # Large inputs wrap to a signed 32-bit value.
    assert hash_string("x" * 50).lstrip("-").isalnum()


def test_content_key_uses_only_totals() -> None:
    project = build_project({"a.py": "1\n2"})
    assert content_key(project) == '{"totalFiles":1,"totalLines":2}'


def test_digest_sections_and_counts() -> None:
    project = build_project(
        {
            "src/index.ts": (
                "async function load() { await fetch(); }\n"
                "for (const x of xs) {}\n"
                "items.map(f); items.forEach(g); while (true) {}\n"
                "class Foo {}\n"
                "const p = new Promise(r => r());\n"
            ),
            "src/util.ts": "function helper(a) { return a; }\nformat(); mapper();\n",
        }
    )

    result = build_digest(project)
    digest = result.digest

    assert digest.startswith("PROJECT OVERVIEW:\n- Files: 2\n")
    assert "- Entry Point: src/index.ts" in digest
    assert "- Loops: 4" in digest
    assert "- Async Operations: 3" in digest
    assert "- Classes: 1" in digest
    assert "- Functions: 2" in digest
    assert "FILE LIST (top 10):\nsrc/index.ts, src/util.ts" in digest
    assert digest.endswith("EXTENSIONS:\nts: 2")


def test_entry_point_defaults_to_unknown() -> None:
    project = build_project({"lib/a.py": "x"})
    assert find_entry_point(project) == "unknown"


def test_entry_point_is_first_match_in_path_order() -> None:
    project = build_project({"z/main.py": "x", "a/index.js": "y"})
    assert find_entry_point(project) == "a/index.js"


def test_file_list_limited_to_ten_paths() -> None:
    project = build_project({f"f{i:02}.py": "x" for i in range(15)})
    digest = build_digest(project).digest
    listed = digest.split("FILE LIST (top 10):\n")[1].split("\n")[0].split(", ")
    assert listed == [f"f{i:02}.py" for i in range(10)]


def test_digest_bounded_for_ten_thousand_files() -> None:
    files = [make_file(f"pkg{i % 50}/module_with_a_long_name_{i}.py", "for x in y: pass") for i in range(10_000)]
    project = process_project(files, now=FIXED_NOW)

    result = build_digest(project)

    assert len(result.digest) <= MAX_DIGEST_CHARS


def test_long_extension_section_is_truncated_hard() -> None:
    files = [make_file(f"f{i}.{'e' * 300}{i}") for i in range(12)]
    project = process_project(files, now=FIXED_NOW)

    digest = build_digest(project).digest

    assert len(digest) == MAX_DIGEST_CHARS


def test_cache_hit_returns_same_digest_for_equal_totals() -> None:
    cache = DigestCache()
    first = build_project({"a.py": "for x"})
    second = build_project({"b.py": "while y"})

    one = build_digest(first, cache=cache)
    two = build_digest(second, cache=cache)

    assert two is one
    assert len(cache) == 1
    assert one.hash == hash_string(content_key(first))


def test_different_totals_are_cached_separately() -> None:
    cache = DigestCache()
    build_digest(build_project({"a.py": "1"}), cache=cache)
    build_digest(build_project({"a.py": "1\n2"}), cache=cache)
    assert len(cache) == 2
