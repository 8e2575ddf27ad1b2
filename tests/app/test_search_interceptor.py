from __future__ import annotations

import asyncio

from boardmode.app.interceptors import SearchCommandInterceptor
from boardmode.domain.views import render_board_frontmatter
from boardmode.ports.hooks import HostHooks

BOARD_TEXT = render_board_frontmatter() + "## Todo\n"


def test_search_hook_waits_for_layout(harness_factory) -> None:
    async def scenario() -> None:
        h = harness_factory()
        await h.service.load()
        await asyncio.sleep(0)
        assert h.service.search_installed is False
        assert h.host.commands.find_command("editor:open-search") is None

        h.workspace.mark_layout_ready()
        await h.service.wait_until_ready()

        assert h.service.search_installed is True
        assert "board-search" in h.host.hooks.command("editor:open-search").names()

    asyncio.run(scenario())


def test_search_goes_to_board_when_board_is_active(harness_factory) -> None:
    async def scenario() -> None:
        h = harness_factory()
        h.workspace.mark_layout_ready()
        await h.service.load()
        await h.service.wait_until_ready()
        h.vault.add_file("Y.md", BOARD_TEXT)
        h.vault.add_file("X.md", "# notes\n")

        board = await h.workspace.open_file("Y.md")
        assert await h.host.commands.execute("editor:open-search") is True
        assert board.view.searches == 1
        assert h.workspace.text_searches == 0

        await h.workspace.open_file("X.md")
        assert await h.host.commands.execute("editor:open-search") is True
        assert board.view.searches == 1
        assert h.workspace.text_searches == 1

    asyncio.run(scenario())


def test_enablement_check_is_left_to_the_host(harness_factory) -> None:
    async def scenario() -> None:
        h = harness_factory()
        h.workspace.mark_layout_ready()
        await h.service.load()
        await h.service.wait_until_ready()
        h.vault.add_file("Y.md", BOARD_TEXT)
        board = await h.workspace.open_file("Y.md")

        assert h.host.commands.is_enabled("editor:open-search") is True
        assert board.view.searches == 0

    asyncio.run(scenario())


def test_search_hook_removed_on_unload(harness_factory) -> None:
    async def scenario() -> None:
        h = harness_factory()
        h.workspace.mark_layout_ready()
        await h.service.load()
        await h.service.wait_until_ready()

        await h.service.unload()

        assert h.service.search_installed is False
        assert len(h.host.hooks.command("editor:open-search")) == 0
        await h.host.commands.execute("editor:open-search")
        assert h.workspace.text_searches == 1

    asyncio.run(scenario())


def test_install_skips_missing_command(harness_factory) -> None:
    h = harness_factory()
    hooks = HostHooks()
    interceptor = SearchCommandInterceptor(h.workspace)
    assert interceptor.install(hooks, h.host.commands) is None
    assert hooks.commands == {}
