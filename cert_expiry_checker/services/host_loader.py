"""
主机列表加载服务
"""
from typing import List
import logging

from ..interfaces import HostListLoaderInterface
from ..exceptions import HostListError

COMMENT_PREFIX = '#'


def load_hosts_from_text(text: str) -> List[str]:
    """
    从文本中解析主机列表

    忽略空行和以 # 开头的行，去掉每行首尾空白。

    Args:
        text: 文本内容

    Returns:
        List[str]: 主机列表（保持原有顺序，不去重）
    """
    hosts = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        hosts.append(line)
    return hosts


class HostListLoader(HostListLoaderInterface):
    """主机列表加载器实现"""

    def __init__(self, path: str, encoding: str = 'utf-8'):
        """
        初始化主机列表加载器

        Args:
            path: 主机列表文件路径
            encoding: 文件编码
        """
        self.path = path
        self.encoding = encoding
        self.logger = logging.getLogger(__name__)

    def get_hosts(self) -> List[str]:
        """
        读取主机列表文件

        Returns:
            List[str]: 主机列表

        Raises:
            HostListError: 文件不存在、无法读取或无法解码
        """
        try:
            with open(self.path, encoding=self.encoding) as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise HostListError(f"无法读取主机列表文件 {self.path}: {str(e)}") from e

        hosts = load_hosts_from_text(text)
        self.logger.info(f"成功加载 {len(hosts)} 个主机")
        return hosts
