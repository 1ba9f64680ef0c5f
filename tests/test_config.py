"""Tests for option loading, alias tables and tsconfig paths."""

import os

import pytest

from circular_scan.config import load_options, parse_alias_pairs, read_tsconfig_paths
from circular_scan.errors import ConfigError
from circular_scan.models import DEFAULT_IGNORE


class TestLoadOptions:
    def test_defaults(self, tmp_path):
        options = load_options(tmp_path)
        assert options.cwd == tmp_path.resolve()
        assert options.ignore == (DEFAULT_IGNORE,)
        assert options.alias == (("@", str(tmp_path.resolve() / "src")),)
        assert options.absolute is False
        assert options.filter is None

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigError, match="does not exist"):
            load_options(tmp_path / "missing")

    def test_file_is_not_a_directory(self, tmp_path):
        path = tmp_path / "a.ts"
        path.write_text("")
        with pytest.raises(ConfigError, match="not a directory"):
            load_options(path)

    def test_worker_count_must_be_positive(self, tmp_path):
        with pytest.raises(ConfigError):
            load_options(tmp_path, max_workers=0)

    def test_ignore_deduplicated_and_default_appended(self, tmp_path):
        options = load_options(tmp_path, ignore=["dist", "**/node_modules/**", "dist", "*.spec.ts"])
        assert options.ignore == ("dist", DEFAULT_IGNORE, "*.spec.ts")

    def test_explicit_alias_overrides_default(self, tmp_path):
        options = load_options(tmp_path, alias={"@": "app", "~": "lib"})
        root = tmp_path.resolve()
        assert dict(options.alias) == {"@": str(root / "app"), "~": str(root / "lib")}

    def test_absolute_alias_target_kept(self, tmp_path):
        options = load_options(tmp_path, alias={"#": str(tmp_path / "shared")})
        assert dict(options.alias)["#"] == str(tmp_path / "shared")

    def test_tsconfig_between_default_and_explicit(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text(
            '{"compilerOptions": {"paths": {"@/*": ["app/*"], "#lib/*": ["lib/*"]}}}'
        )
        root = tmp_path.resolve()
        assert dict(load_options(tmp_path).alias) == {
            "@": str(root / "app"),
            "#lib": str(root / "lib"),
        }
        options = load_options(tmp_path, alias={"#lib": "vendor"})
        assert dict(options.alias)["#lib"] == str(root / "vendor")

    def test_tsconfig_can_be_skipped(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text('{"compilerOptions": {"paths": {"@/*": ["app/*"]}}}')
        options = load_options(tmp_path, read_tsconfig=False)
        assert dict(options.alias) == {"@": str(tmp_path.resolve() / "src")}

    def test_options_are_frozen(self, tmp_path):
        options = load_options(tmp_path)
        with pytest.raises(AttributeError):
            options.absolute = True

    def test_file_identity(self, tmp_path):
        root = tmp_path.resolve()
        relative = load_options(tmp_path)
        absolute = load_options(tmp_path, absolute=True)
        path = str(root / "src" / ".." / "src" / "a.ts")
        assert relative.file_identity(path) == os.path.join("src", "a.ts")
        assert absolute.file_identity(path) == str(root / "src" / "a.ts")


class TestTsconfigPaths:
    def test_comments_and_trailing_commas(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text(
            "{\n"
            "  // editor settings\n"
            '  "compilerOptions": {\n'
            '    "baseUrl": "./web", /* relative to config */\n'
            '    "paths": {\n'
            '      "@/*": ["src/*",],\n'
            '      "comp": ["src/components"],\n'
            "    },\n"
            "  },\n"
            "}\n"
        )
        assert read_tsconfig_paths(tmp_path) == {
            "@": [os.path.normpath(tmp_path / "web" / "src")],
            "comp": [os.path.normpath(tmp_path / "web" / "src" / "components")],
        }

    def test_slashes_inside_strings_survive(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text('{"compilerOptions": {"paths": {"//x/*": ["a//b/*"]}}}')
        assert read_tsconfig_paths(tmp_path) == {"//x": [os.path.normpath(tmp_path / "a//b")]}

    def test_jsconfig_used_when_no_tsconfig(self, tmp_path):
        (tmp_path / "jsconfig.json").write_text('{"compilerOptions": {"paths": {"~/*": ["./*"]}}}')
        assert read_tsconfig_paths(tmp_path) == {"~": [os.path.normpath(tmp_path)]}

    def test_catch_all_and_empty_targets_skipped(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text(
            '{"compilerOptions": {"paths": {"*": ["types/*"], "x/*": []}}}'
        )
        assert read_tsconfig_paths(tmp_path) == {}

    def test_invalid_json_is_ignored(self, tmp_path, caplog):
        (tmp_path / "tsconfig.json").write_text("{ not json")
        assert read_tsconfig_paths(tmp_path) == {}
        assert "Ignoring unreadable" in caplog.text

    def test_no_config(self, tmp_path):
        assert read_tsconfig_paths(tmp_path) == {}

    def test_extends_chain(self, tmp_path):
        (tmp_path / "configs").mkdir()
        (tmp_path / "configs" / "tsconfig.base.json").write_text(
            '{"compilerOptions": {"baseUrl": "..", "paths": {"~/*": ["lib/*"]}, "strict": true}}'
        )
        (tmp_path / "tsconfig.json").write_text(
            '{"extends": "./configs/tsconfig.base", "compilerOptions": {"strict": false}}'
        )
        assert read_tsconfig_paths(tmp_path) == {"~": [os.path.normpath(tmp_path / "lib")]}

    def test_own_paths_replace_base_paths(self, tmp_path):
        (tmp_path / "base").mkdir()
        (tmp_path / "base" / "tsconfig.json").write_text(
            '{"compilerOptions": {"paths": {"~/*": ["lib/*"]}}}'
        )
        (tmp_path / "tsconfig.json").write_text(
            '{"extends": ["./base/tsconfig.json"], "compilerOptions": {"paths": {"#/*": ["app/*"]}}}'
        )
        assert read_tsconfig_paths(tmp_path) == {"#": [os.path.normpath(tmp_path / "app")]}

    def test_paths_relative_to_declaring_config(self, tmp_path):
        (tmp_path / "base").mkdir()
        (tmp_path / "base" / "tsconfig.json").write_text(
            '{"compilerOptions": {"paths": {"~/*": ["lib/*"]}}}'
        )
        (tmp_path / "tsconfig.json").write_text('{"extends": "./base/tsconfig.json"}')
        assert read_tsconfig_paths(tmp_path) == {"~": [os.path.normpath(tmp_path / "base" / "lib")]}

    def test_missing_or_circular_base_is_skipped(self, tmp_path, caplog):
        (tmp_path / "a.json").write_text('{"extends": "./tsconfig.json"}')
        (tmp_path / "tsconfig.json").write_text(
            '{"extends": ["./a.json", "./gone.json"], "compilerOptions": {"paths": {"~/*": ["x/*"]}}}'
        )
        assert read_tsconfig_paths(tmp_path) == {"~": [os.path.normpath(tmp_path / "x")]}
        assert "circular extends" in caplog.text
        assert "cannot find base config" in caplog.text

    def test_found_in_parent_directory(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text('{"compilerOptions": {"paths": {"~/*": ["shared/*"]}}}')
        app = tmp_path / "packages" / "app"
        app.mkdir(parents=True)
        assert read_tsconfig_paths(app) == {"~": [os.path.normpath(tmp_path / "shared")]}

    def test_every_target_kept_in_order(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text(
            '{"compilerOptions": {"paths": {"@/*": ["src/*", "generated/*"]}}}'
        )
        root = tmp_path.resolve()
        assert read_tsconfig_paths(root) == {"@": [str(root / "src"), str(root / "generated")]}
        assert load_options(tmp_path).alias == (
            ("@", str(root / "src")),
            ("@", str(root / "generated")),
        )


class TestParseAliasPairs:
    def test_pairs(self):
        assert parse_alias_pairs(["@:src", "~:lib/shared"]) == {"@": "src", "~": "lib/shared"}

    def test_later_pair_wins(self):
        assert parse_alias_pairs(["@:src", "@:app"]) == {"@": "app"}

    @pytest.mark.parametrize("pair", ["@", "@:", ":src", ""])
    def test_malformed(self, pair):
        with pytest.raises(ConfigError, match="Invalid alias"):
            parse_alias_pairs([pair])
