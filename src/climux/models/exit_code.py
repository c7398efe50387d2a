"""ExitCode: 終了コードの定義。"""

from enum import IntEnum


class ExitCode(IntEnum):
    """プロセス終了コード。

    コマンド自身の run() はこれ以外の整数も返し得る（バックエンドの終了コードを
    そのまま伝播するため）。ここに並ぶのは climux 自身が決める値のみ。
    """

    SUCCESS = 0
    EXECUTION_ERROR = 1
    USAGE_ERROR = 2
    NOT_FOUND = 127
