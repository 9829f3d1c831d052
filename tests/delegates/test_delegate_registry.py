"""
Brief: Tests for echodns.delegates.registry and BaseDelegate.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

from echodns.delegates.base import BaseDelegate, delegate_aliases
from echodns.delegates.dnspython import DnsPythonDelegate
from echodns.delegates.hosts import HostsDelegate
from echodns.delegates.registry import (
    BUILTIN_DELEGATES,
    alias_table,
    get_delegate_class,
)
from echodns.delegates.system import SystemDelegate
from echodns.errors import UnknownHostError


def test_alias_table_covers_builtin_delegates():
    """
    Brief: Every alias of the built-in delegates maps to its class.

    Inputs:
      - None

    Outputs:
      - None: Asserts alias -> class mapping
    """
    table = alias_table()
    assert set(BUILTIN_DELEGATES) == {SystemDelegate, HostsDelegate, DnsPythonDelegate}
    assert table["system"] is SystemDelegate
    assert table["native"] is SystemDelegate
    assert table["os"] is SystemDelegate
    assert table["hosts"] is HostsDelegate
    assert table["etc_hosts"] is HostsDelegate
    assert table["hostfile"] is HostsDelegate
    assert table["dnspython"] is DnsPythonDelegate
    assert table["dns"] is DnsPythonDelegate
    assert BaseDelegate not in table.values()


def test_get_delegate_class_normalizes_alias():
    """
    Brief: Aliases are case- and dash-insensitive.

    Inputs:
      - "Etc-Hosts"

    Outputs:
      - None: Asserts HostsDelegate
    """
    assert get_delegate_class(" Etc-Hosts ") is HostsDelegate


def test_get_delegate_class_uses_given_table():
    """
    Brief: A caller-supplied table replaces the built-in aliases.

    Inputs:
      - table holding only a custom delegate

    Outputs:
      - None: Asserts custom class found and built-ins unknown
    """

    @delegate_aliases("static")
    class Static(BaseDelegate):
        pass

    table = alias_table([Static])
    assert get_delegate_class("STATIC", table) is Static
    with pytest.raises(KeyError):
        get_delegate_class("hosts", table)


def test_get_delegate_class_loads_dotted_path():
    """
    Brief: Dotted paths import delegates from any module.

    Inputs:
      - "echodns.delegates.hosts.HostsDelegate"

    Outputs:
      - None: Asserts HostsDelegate
    """
    assert get_delegate_class("echodns.delegates.hosts.HostsDelegate") is HostsDelegate


def test_get_delegate_class_unknown_alias_suggests():
    """
    Brief: Unknown aliases raise KeyError with suggestions.

    Inputs:
      - misspelled alias "hostz"

    Outputs:
      - None: Asserts KeyError mentioning the close match
    """
    with pytest.raises(KeyError) as info:
        get_delegate_class("hostz")
    assert "hosts" in str(info.value)


def test_get_delegate_class_rejects_non_delegates():
    """
    Brief: Dotted paths must name BaseDelegate subclasses.

    Inputs:
      - dotted path to a non-delegate

    Outputs:
      - None: Asserts TypeError
    """
    with pytest.raises(TypeError):
        get_delegate_class("echodns.codec.Codec")
    with pytest.raises(ValueError):
        get_delegate_class(".Thing")


def test_duplicate_aliases_are_rejected():
    """
    Brief: Two delegate classes claiming one alias is an error.

    Inputs:
      - HostsDelegate plus another class claiming "hosts"

    Outputs:
      - None: Asserts ValueError naming both classes
    """

    @delegate_aliases("hosts")
    class OtherHosts(BaseDelegate):
        pass

    with pytest.raises(ValueError) as info:
        alias_table([HostsDelegate, OtherHosts])
    assert "OtherHosts" in str(info.value)
    assert "HostsDelegate" in str(info.value)


def test_delegates_without_aliases_are_rejected():
    """
    Brief: A delegate class must declare at least one alias to be listed.

    Inputs:
      - subclass without @delegate_aliases

    Outputs:
      - None: Asserts ValueError
    """

    class Anonymous(BaseDelegate):
        pass

    with pytest.raises(ValueError):
        alias_table([Anonymous])


def test_base_delegate_naming_and_defaults():
    """
    Brief: Names default to the first alias, then the class name.

    Inputs:
      - delegates with and without aliases

    Outputs:
      - None: Asserts names, config and unimplemented lookup
    """

    class Plain(BaseDelegate):
        pass

    assert Plain().name == "Plain"
    assert HostsDelegate().name == "hosts"
    assert HostsDelegate(name="mine").name == "mine"
    assert Plain(x=1).config == {"x": 1}
    assert Plain.get_config_model() is None
    assert "Plain" in repr(Plain())
    with pytest.raises(NotImplementedError):
        Plain().lookup_all("x")


def test_delegate_subclass_contract():
    """
    Brief: A subclass only needs lookup_all raising UnknownHostError on misses.

    Inputs:
      - inline subclass

    Outputs:
      - None: Asserts UnknownHostError
    """

    class Nothing(BaseDelegate):
        def lookup_all(self, name):
            raise UnknownHostError(name)

    with pytest.raises(UnknownHostError):
        Nothing().lookup_all("x")
