"""
Tests for the idempotent shell-config patcher.
"""

import threading
from pathlib import Path

import pytest

from ubuntu_toolbox.patcher import PatchMode, append_once, apply_block, replace_line

BLOCK = """
# >>> demo configuration >>>
export DEMO=1
# <<< demo configuration <<<
"""


class TestReplaceLine:
    def test_rewrites_existing_key_in_place(self):
        content = "# header\nTHEME=old\nalias ll='ls -l'\n"
        result = replace_line(content, "THEME", "new")
        assert result == "# header\nTHEME=new\nalias ll='ls -l'\n"
        assert result.splitlines().count("THEME=new") == 1

    def test_appends_when_key_missing(self):
        assert replace_line("a=1\n", "THEME", "new") == "a=1\nTHEME=new\n"

    def test_appends_after_unterminated_last_line(self):
        assert replace_line("a=1", "THEME", "new") == "a=1\nTHEME=new\n"

    def test_empty_content(self):
        assert replace_line("", "THEME", "new") == "THEME=new\n"

    def test_key_prefix_does_not_match_longer_keys(self):
        content = "THEME_COLOR=blue\n"
        assert replace_line(content, "THEME", "x") == "THEME_COLOR=blue\nTHEME=x\n"

    def test_commented_key_is_not_rewritten(self):
        content = "# THEME=old\n"
        assert replace_line(content, "THEME", "new") == "# THEME=old\nTHEME=new\n"

    def test_every_matching_line_is_rewritten(self):
        content = "THEME=a\nx\nTHEME=b\n"
        assert replace_line(content, "THEME", "c") == "THEME=c\nx\nTHEME=c\n"

    def test_keeps_missing_trailing_newline(self):
        assert replace_line("THEME=old", "THEME", "new") == "THEME=new"

    def test_converges(self):
        once = replace_line("THEME=old\n", "THEME", '"p10k"')
        assert replace_line(once, "THEME", '"p10k"') == once


class TestAppendOnce:
    def test_appends_after_blank_line(self):
        result = append_once("existing\n", "demo configuration", BLOCK)
        assert result == (
            "existing\n"
            "\n"
            "# >>> demo configuration >>>\n"
            "export DEMO=1\n"
            "# <<< demo configuration <<<\n"
        )

    def test_noop_when_marker_present(self):
        content = "something about demo configuration here\n"
        assert append_once(content, "demo configuration", BLOCK) == content

    def test_terminates_unterminated_content_first(self):
        result = append_once("existing", "demo configuration", BLOCK)
        assert result.startswith("existing\n\n# >>> demo")

    def test_block_without_marker_is_rejected(self):
        with pytest.raises(ValueError):
            append_once("", "missing marker", BLOCK)

    def test_empty_marker_is_rejected(self):
        with pytest.raises(ValueError):
            append_once("", "", BLOCK)


class TestApplyBlock:
    def test_creates_missing_file_and_parents(self, tmp_path: Path):
        target = tmp_path / "nested" / "dir" / ".zshrc"
        assert apply_block(target, "demo configuration", BLOCK) is True
        assert target.is_file()
        assert "export DEMO=1" in target.read_text()

    def test_append_once_converges(self, tmp_path: Path):
        target = tmp_path / ".bashrc"
        target.write_text("# user stuff\nexport PATH=$HOME/bin:$PATH\n")

        assert apply_block(target, "demo configuration", BLOCK) is True
        after_first = target.read_bytes()
        for _ in range(3):
            assert apply_block(target, "demo configuration", BLOCK) is False
        assert target.read_bytes() == after_first
        assert after_first.startswith(b"# user stuff\nexport PATH=$HOME/bin:$PATH\n")

    def test_replace_line_converges(self, tmp_path: Path):
        target = tmp_path / ".zshrc"
        target.write_text('export ZSH="$HOME/.oh-my-zsh"\nZSH_THEME="robbyrussell"\nsource $ZSH/oh-my-zsh.sh\n')

        assert apply_block(target, "ZSH_THEME", '"powerlevel10k/powerlevel10k"', PatchMode.REPLACE_LINE)
        assert not apply_block(target, "ZSH_THEME", '"powerlevel10k/powerlevel10k"', PatchMode.REPLACE_LINE)
        assert target.read_text().splitlines() == [
            'export ZSH="$HOME/.oh-my-zsh"',
            'ZSH_THEME="powerlevel10k/powerlevel10k"',
            "source $ZSH/oh-my-zsh.sh",
        ]

    def test_concurrent_writers_do_not_interleave(self, tmp_path: Path):
        target = tmp_path / ".zshrc"
        blocks = [
            (f"block {i} marker", f"# block {i} marker\necho {i}\n") for i in range(8)
        ]

        threads = [
            threading.Thread(target=apply_block, args=(target, marker, block))
            for marker, block in blocks
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        content = target.read_text()
        for i in range(8):
            assert content.count(f"# block {i} marker") == 1
            assert content.count(f"echo {i}\n") == 1

    def test_non_utf8_bytes_survive(self, tmp_path: Path):
        target = tmp_path / ".bashrc"
        original = b"# caf\xe9 latin-1 comment\nEDITOR=vim\n"
        target.write_bytes(original)

        assert apply_block(target, "demo configuration", BLOCK) is True
        assert apply_block(target, "EDITOR", "nvim", PatchMode.REPLACE_LINE) is True
        assert apply_block(target, "demo configuration", BLOCK) is False

        data = target.read_bytes()
        assert data.startswith(b"# caf\xe9 latin-1 comment\nEDITOR=nvim\n\n# >>>")
        assert data.count(b"# >>> demo configuration >>>") == 1
