"""Tests for locating class files in directories and archives."""

import zipfile
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from classbytes import simple_class
from pyjdecode.classreader import ClassPath
from pyjdecode.errors import InvalidMagic


@pytest.fixture
def class_dir(tmp_path):
    root = tmp_path / "classes"
    target = root / "com" / "example" / "Service.class"
    target.parent.mkdir(parents=True)
    target.write_bytes(simple_class("com/example/Service"))
    return root


@pytest.fixture
def jar(tmp_path):
    path = tmp_path / "lib.jar"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("org/lib/Util.class", simple_class("org/lib/Util"))
        zf.writestr("org/lib/Broken.class", simple_class("org/lib/Broken", magic=0))
    return path


class TestClassPath:
    def test_directory(self, class_dir):
        with ClassPath() as classpath:
            classpath.add_path(class_dir)
            with classpath.find_class("com/example/Service") as class_file:
                assert class_file.signature == "Lcom/example/Service;"

    def test_jar(self, jar):
        with ClassPath() as classpath:
            classpath.add_path(jar)
            assert classpath.find_class("org/lib/Util").name == "org/lib/Util"

    def test_search_order(self, class_dir, jar):
        with ClassPath() as classpath:
            classpath.add_path(jar)
            classpath.add_path(class_dir)
            assert classpath.find_bytes("com/example/Service") is not None
            assert classpath.find_bytes("org/lib/Util") is not None

    def test_missing_class(self, class_dir):
        with ClassPath() as classpath:
            classpath.add_path(class_dir)
            assert classpath.find_bytes("com/example/Missing") is None
            assert classpath.find_class("com/example/Missing") is None

    def test_options_are_passed_to_decode(self, jar):
        with ClassPath() as classpath:
            classpath.add_path(jar)
            assert classpath.find_class("org/lib/Broken").name == "org/lib/Broken"
            with pytest.raises(InvalidMagic):
                classpath.find_class("org/lib/Broken", strict=True)

    def test_invalid_entry(self, tmp_path):
        with ClassPath() as classpath:
            with pytest.raises(ValueError):
                classpath.add_path(tmp_path / "nothing-here")

    def test_archive_that_is_not_a_zip(self, tmp_path):
        bogus = tmp_path / "bogus.zip"
        bogus.write_bytes(b"PK but not really")
        with ClassPath() as classpath:
            with pytest.raises(ValueError, match="Invalid classpath entry") as exc_info:
                classpath.add_path(bogus)
            assert isinstance(exc_info.value.__cause__, zipfile.BadZipFile)
            assert classpath.entries == []

    def test_close_releases_archives(self, jar):
        classpath = ClassPath()
        classpath.add_path(jar)
        zf = classpath.entries[0]
        classpath.close()
        assert classpath.entries == []
        assert zf.fp is None
