"""
Unit tests for dotted-path object loading.

Dependencies: pytest, schema_model.core.loading
System role: Configured class name resolution verification
"""

import pytest

from film_schema import Actor, FilmBase
from schema_model.core.loading import load_object


class TestLoadObject:
    def test_dotted_path(self):
        assert load_object("film_schema.FilmBase") is FilmBase

    def test_colon_path(self):
        assert load_object("film_schema:Actor") is Actor

    def test_colon_path_with_attribute_chain(self):
        """Test attributes after the colon may be nested."""
        # Act
        table = load_object("film_schema:Actor.__table__")

        # Assert
        assert table.name == "actor"

    def test_missing_module(self):
        with pytest.raises(ImportError):
            load_object("no_such_module.Thing")

    def test_missing_attribute_raises_import_error(self):
        with pytest.raises(ImportError):
            load_object("film_schema:Nothing")

    @pytest.mark.parametrize("path", ["", "film_schema", ":Actor", None])
    def test_malformed_path(self, path):
        with pytest.raises(ImportError):
            load_object(path)
