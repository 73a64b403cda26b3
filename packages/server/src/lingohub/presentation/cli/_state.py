# packages/server/src/lingohub/presentation/cli/_state.py
"""CLI 上下文中传递的共享状态。"""

from lingohub.config import LingoHubConfig


class CLISharedState:
    def __init__(self, config: LingoHubConfig):
        self.config = config
