"""Tests for the capability surface handed to scripts."""

import pytest

from openide.core.surface import SURFACE_METHODS, SURFACE_VERSION, CapabilitySurface


@pytest.mark.asyncio
async def test_surface_exposes_fixed_method_set(session):
    await session.start()
    api = session.surface
    assert set(api) == set(SURFACE_METHODS)
    assert api.version == SURFACE_VERSION
    assert api.create_file is api["create_file"]


def test_surface_is_read_only():
    api = CapabilitySurface({"f": len})
    with pytest.raises(AttributeError):
        api.f = print
    with pytest.raises(AttributeError):
        del api.f
    with pytest.raises(TypeError):
        api["f"] = print


def test_unknown_method_is_attribute_error():
    with pytest.raises(AttributeError, match="no method 'nope'"):
        CapabilitySurface({}).nope


def test_methods_do_not_expose_bound_components(session):
    for name in SURFACE_METHODS:
        assert not hasattr(session.surface[name], "__self__")


@pytest.mark.asyncio
async def test_surface_rebuilt_on_tree_change(session):
    await session.start()
    before = session.surface
    await session.workspace.create_file("a.py")
    assert session.surface is not before
    assert session.surface.generation > before.generation
    assert set(before) == set(session.surface)


@pytest.mark.asyncio
async def test_script_manages_files_through_api(session):
    await session.start()
    script = """
await api.create_file("notes/todo.txt", "milk")
await api.write_file("notes/todo.txt", "eggs")
text = await api.read_file("notes/todo.txt")
tree = await api.list_files()
console.log(text, [n.path for n in tree.iter_files()])
await api.delete_file("notes")
"""
    record = await session.execute(script)
    assert record.ok, record.output
    assert record.output == "eggs ['notes/todo.txt']"
    assert session.workspace.tree.children == []


@pytest.mark.asyncio
async def test_workspace_errors_reach_script_as_exceptions(session):
    await session.start()
    record = await session.execute("await api.read_file('missing.py')")
    assert record.error_type == "NotFoundError"


@pytest.mark.asyncio
async def test_nested_execute_returns_record(session):
    await session.start()
    record = await session.execute("inner = await api.execute('1+1')\ninner.output")
    assert record.output == "2"
    assert [r.origin for r in session.history] == ["<api.execute>", "<input>"]


@pytest.mark.asyncio
async def test_nested_output_stays_separate(session):
    await session.start()
    record = await session.execute("console.log('outer')\nawait api.execute(\"console.log('inner')\")")
    assert record.output == "outer"
    assert session.history[0].output == "inner"


@pytest.mark.asyncio
async def test_script_registers_plugin_with_init_hook(session):
    await session.start()
    script = """
seen = []
api.register_plugin("shout", {"init": seen.append, "run": lambda s: s.upper() + "!"})
console.log(api.get_plugin("shout").call("run", "hi"), api.list_plugins(), seen[0] is api)
"""
    record = await session.execute(script)
    assert record.output == "HI! ['shout'] True"


@pytest.mark.asyncio
async def test_double_registration_leaves_one_entry(session):
    await session.start()
    await session.execute("api.register_plugin('p', {'v': lambda: 1})")
    await session.execute("api.register_plugin('p', {'v': lambda: 2})")
    assert session.registry.list() == {"p"}
    assert session.registry.get("p").call("v") == 2


@pytest.mark.asyncio
async def test_script_opens_tabs(session):
    await session.start()
    await session.workspace.create_file("a.py", "x = 1")
    record = await session.execute("tab = await api.open_file('a.py')\n[t.path for t in api.list_tabs()]")
    assert record.output == "['a.py']"
    assert session.tabs.active_tab.path == "a.py"
