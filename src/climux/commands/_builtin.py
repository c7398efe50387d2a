"""組み込みコマンド表の構築。

build_registry() は起動時に1度だけ呼ばれ、全コマンド名とファクトリを登録する。
ファクトリはいずれも CommandDeps と自身の設定だけを閉じ込め、
呼び出されるたびに新しいインスタンスを返す。
"""

from __future__ import annotations

import functools
from types import MappingProxyType
from typing import Final, Mapping

from climux.commands._backend import BackendCommand, LongRunningBackendCommand
from climux.commands._contract import CommandDeps
from climux.commands._local import GroupCommand, KeygenCommand, VersionCommand
from climux.commands._registry import CommandRegistry

BACKEND_COMMANDS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "configtest": "Validate config file",
        "event": "Fire a new event",
        "force-leave": "Forces a member of the cluster to enter the \"left\" state",
        "info": "Provides debugging information for operators",
        "join": "Tell the agent to join a cluster",
        "keyring": "Manages gossip layer encryption keys",
        "kv delete": "Removes data from the KV store",
        "kv export": "Exports a tree from the KV store as JSON",
        "kv get": "Retrieves or lists data from the KV store",
        "kv import": "Imports a tree stored as JSON to the KV store",
        "kv put": "Sets or updates data in the KV store",
        "leave": "Gracefully leaves the cluster and shuts down",
        "maint": "Controls node or service maintenance mode",
        "members": "Lists the members of a cluster",
        "reload": "Triggers the agent to reload configuration files",
        "rtt": "Estimates network round trip time between nodes",
        "snapshot inspect": "Displays information about a snapshot file",
        "snapshot restore": "Restores snapshot of server state",
        "snapshot save": "Saves snapshot of server state",
    }
)
"""バックエンドを1回起動して終わるコマンド。"""

LONG_RUNNING_COMMANDS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "agent": "Runs an agent",
        "exec": "Executes a command on cluster nodes",
        "lock": "Execute a command holding a lock",
        "monitor": "Stream logs from an agent",
        "watch": "Watch for changes in the cluster",
    }
)
"""シャットダウン通知を受け取る長時間実行コマンド。"""

GROUP_COMMANDS: Final[Mapping[str, tuple[str, str]]] = MappingProxyType(
    {
        "kv": (
            "Interact with the key-value store",
            "Interact with the key-value store: store, retrieve and manage data.",
        ),
        "operator": (
            "Provides cluster-level tools for operators",
            "Provides cluster-level tools for operators, such as interacting with\n"
            "  the Raft subsystem.",
        ),
        "snapshot": (
            "Saves, restores and inspects snapshots of server state",
            "Saves, restores and inspects snapshots of server state, for\n"
            "  disaster recovery.",
        ),
    }
)
"""サブコマンドをまとめる親コマンド（名前 → (概要, 説明)）。"""


def build_registry(deps: CommandDeps) -> CommandRegistry:
    """全組み込みコマンドを登録したレジストリを構築する。

    長時間実行コマンドの ShutdownProvider はこの時点で作成される。
    deps.config.eager_shutdown_streams が有効ならストリーム自体もここで作られる。

    Args:
        deps: 全ファクトリが共有する依存関係。

    Returns:
        構築済みのレジストリ。
    """
    registry = CommandRegistry()
    backend = deps.config.backend_command

    for name, synopsis in BACKEND_COMMANDS.items():
        registry.register(
            name,
            functools.partial(
                BackendCommand, name, synopsis, ui=deps.ui, backend=backend
            ),
        )

    for name, synopsis in LONG_RUNNING_COMMANDS.items():
        registry.register(
            name,
            functools.partial(
                LongRunningBackendCommand,
                name,
                synopsis,
                ui=deps.ui,
                backend=backend,
                shutdown=deps.shutdown_provider(),
                force_kill_after=deps.config.force_kill_after,
            ),
        )

    for name, (synopsis, description) in GROUP_COMMANDS.items():
        registry.register(
            name,
            functools.partial(
                GroupCommand,
                name,
                synopsis,
                description,
                ui=deps.ui,
                subcommands=functools.partial(registry.subcommands, name),
            ),
        )

    registry.register("keygen", functools.partial(KeygenCommand, ui=deps.ui))
    registry.register(
        "version", functools.partial(VersionCommand, ui=deps.ui, version=deps.version)
    )
    return registry
