"""
Test Suite for Schema Descriptors and Bootstrap
"""

import json
import sqlite3

import pytest
import yaml

from vaultseed.config import SchemaConfig, PACKAGE_DATA_DIR
from vaultseed.schema import (
    BusinessObject,
    DescriptorError,
    SchemaBootstrapper,
    SchemaExecutionError,
    discover_descriptor_files,
    load_descriptor,
    load_descriptors,
)


def write_xml(path, name, script):
    path.write_text(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<BusinessObject><Name>{name}</Name><Script>{script}</Script></BusinessObject>'
    )
    return path


def table_names(connection):
    rows = connection.execute("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")
    return [r[0] for r in rows]


class TestLoadDescriptor:
    """Test parsing of individual descriptors"""

    def test_xml(self, tmp_path):
        path = write_xml(tmp_path / "Account.xml", "Account", "CREATE TABLE Account (Id INTEGER);")

        descriptor = load_descriptor(path)

        assert descriptor.name == "Account"
        assert descriptor.script == "CREATE TABLE Account (Id INTEGER);"
        assert descriptor.source == str(path)

    def test_yaml(self, tmp_path):
        path = tmp_path / "user.yaml"
        path.write_text(yaml.dump({'Name': 'User', 'Script': 'CREATE TABLE User (Id INTEGER);'}))

        assert load_descriptor(path) == BusinessObject('User', 'CREATE TABLE User (Id INTEGER);', str(path))

    def test_json_name_defaults_to_stem(self, tmp_path):
        path = tmp_path / "Document.json"
        path.write_text(json.dumps({'script': 'CREATE TABLE Document (Id INTEGER);'}))

        assert load_descriptor(path).name == "Document"

    def test_missing_file(self, tmp_path):
        with pytest.raises(DescriptorError, match="not found"):
            load_descriptor(tmp_path / "Absent.xml")

    def test_unparsable(self, tmp_path):
        path = tmp_path / "Broken.xml"
        path.write_text("<BusinessObject><Name>Broken</Name>")

        with pytest.raises(DescriptorError, match="Could not parse"):
            load_descriptor(path)

    def test_utf16_xml(self, tmp_path):
        path = tmp_path / "Account.xml"
        path.write_bytes((
            '<?xml version="1.0" encoding="utf-16"?>\n'
            '<BusinessObject><Name>Account</Name>'
            '<Script>CREATE TABLE Account (Id INTEGER);</Script></BusinessObject>'
        ).encode('utf-16'))

        descriptor = load_descriptor(path)

        assert descriptor.name == "Account"
        assert descriptor.script == "CREATE TABLE Account (Id INTEGER);"

    @pytest.mark.parametrize("filename", ["Garbled.xml", "Garbled.yaml", "Garbled.json"])
    def test_undecodable_bytes(self, tmp_path, filename):
        path = tmp_path / filename
        path.write_bytes(b'\xff\xfe\xfa')

        with pytest.raises(DescriptorError, match="Could not parse"):
            load_descriptor(path)

    def test_empty_script(self, tmp_path):
        path = write_xml(tmp_path / "Empty.xml", "Empty", "   ")

        with pytest.raises(DescriptorError, match="no script"):
            load_descriptor(path)

    def test_not_a_record(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text(yaml.dump(['CREATE TABLE x (Id INTEGER);']))

        with pytest.raises(DescriptorError, match="single record"):
            load_descriptor(path)


class TestDiscovery:
    """Test descriptor ordering"""

    @pytest.fixture
    def schema_dir(self, tmp_path):
        for name in ("Document", "Account", "User"):
            write_xml(tmp_path / f"{name}.xml", name, f"CREATE TABLE {name} (Id INTEGER);")
        (tmp_path / "notes.txt").write_text("ignored")
        return tmp_path

    def test_sorted_by_filename(self, schema_dir):
        names = [p.name for p in discover_descriptor_files(schema_dir)]

        assert names == ["Account.xml", "Document.xml", "User.xml"]

    def test_explicit_order_preserved(self, schema_dir):
        files = ["User.xml", "Account.xml", "Document.xml"]

        names = [p.name for p in discover_descriptor_files(schema_dir, files)]

        assert names == files

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DescriptorError, match="directory not found"):
            discover_descriptor_files(tmp_path / "absent")

    def test_min_objects(self, schema_dir):
        with pytest.raises(DescriptorError, match="at least 4"):
            load_descriptors(schema_dir, min_objects=4)


class TestSchemaBootstrapper:
    """Test script execution against a store"""

    def test_shipped_v2_schema(self, connection):
        bootstrapper = SchemaBootstrapper(SchemaConfig(version="v2"))

        created = bootstrapper.bootstrap(connection)

        assert created == ["Account", "Document", "User"]
        assert table_names(connection) == ["Account", "Document", "User"]
        columns = [r[1] for r in connection.execute("PRAGMA table_info(Account)")]
        assert columns == ["Id", "Name", "CreatedOn"]

    def test_shipped_v1_schema_has_no_created_on(self, connection):
        SchemaBootstrapper(SchemaConfig(version="v1")).bootstrap(connection)

        for table in ("Account", "Document", "User"):
            columns = [r[1] for r in connection.execute(f'PRAGMA table_info("{table}")')]
            assert "CreatedOn" not in columns

    def test_shipped_versions_exist(self):
        assert (PACKAGE_DATA_DIR / "schema" / "v1").is_dir()
        assert (PACKAGE_DATA_DIR / "schema" / "v2").is_dir()

    def test_runs_in_descriptor_order(self, connection):
        descriptors = [
            BusinessObject("Parent", "CREATE TABLE Parent (Id INTEGER PRIMARY KEY);"),
            BusinessObject("Child", "CREATE TABLE Child (Id INTEGER, ParentId INTEGER REFERENCES Parent (Id));"
                                    "INSERT INTO Parent (Id) VALUES (1);"
                                    "INSERT INTO Child (Id, ParentId) VALUES (1, 1);"),
        ]

        created = SchemaBootstrapper(SchemaConfig(), descriptors).bootstrap(connection)

        assert created == ["Parent", "Child"]
        assert connection.execute("SELECT COUNT(*) FROM Child").fetchone()[0] == 1

    def test_malformed_script(self, connection):
        descriptors = [
            BusinessObject("Good", "CREATE TABLE Good (Id INTEGER);"),
            BusinessObject("Bad", "CREATE TABEL Bad (Id INTEGER);", source="Bad.xml"),
            BusinessObject("Never", "CREATE TABLE Never (Id INTEGER);"),
        ]

        with pytest.raises(SchemaExecutionError, match="Bad") as excinfo:
            SchemaBootstrapper(SchemaConfig(), descriptors).bootstrap(connection)

        assert isinstance(excinfo.value.__cause__, sqlite3.Error)
        assert table_names(connection) == ["Good"]

    def test_bad_descriptor_runs_nothing(self, connection, tmp_path):
        write_xml(tmp_path / "Account.xml", "Account", "CREATE TABLE Account (Id INTEGER);")
        (tmp_path / "User.xml").write_text("<BusinessObject>")
        config = SchemaConfig(directory=str(tmp_path), min_objects=2)

        with pytest.raises(DescriptorError):
            SchemaBootstrapper(config).bootstrap(connection)

        assert table_names(connection) == []
