"""
主机列表加载器测试
"""
import pytest

from cert_expiry_checker.services.host_loader import HostListLoader, load_hosts_from_text
from cert_expiry_checker.exceptions import HostListError


class TestLoadHostsFromText:
    """文本解析测试类"""

    def test_skips_blank_and_comment_lines(self):
        """测试跳过空行和注释行"""
        assert load_hosts_from_text("  \n# comment\nhost1\nhost2\n") == ["host1", "host2"]

    def test_trims_whitespace(self):
        """测试去除首尾空白"""
        assert load_hosts_from_text("  example.com:8443 \t\n") == ["example.com:8443"]

    def test_indented_comment(self):
        """测试缩进的注释行"""
        assert load_hosts_from_text("   # disabled.example.com\nactive.example.com") == ["active.example.com"]

    def test_keeps_order_and_duplicates(self):
        """测试保持顺序且不去重"""
        assert load_hosts_from_text("b.com\na.com\nb.com\n") == ["b.com", "a.com", "b.com"]

    def test_windows_line_endings(self):
        """测试Windows换行符"""
        assert load_hosts_from_text("a.com\r\nb.com\r\n") == ["a.com", "b.com"]

    def test_empty_text(self):
        """测试空文本"""
        assert load_hosts_from_text("") == []


class TestHostListLoader:
    """主机列表加载器测试类"""

    def test_get_hosts(self, tmp_path):
        """测试读取主机列表文件"""
        path = tmp_path / "hosts.txt"
        path.write_text("# production\nexample.com\n\n  example.org:8443  \n", encoding="utf-8")

        hosts = HostListLoader(str(path)).get_hosts()

        assert hosts == ["example.com", "example.org:8443"]

    def test_missing_file(self, tmp_path):
        """测试文件不存在"""
        loader = HostListLoader(str(tmp_path / "missing.txt"))

        with pytest.raises(HostListError, match="无法读取主机列表文件"):
            loader.get_hosts()

    def test_directory_instead_of_file(self, tmp_path):
        """测试路径是目录"""
        with pytest.raises(HostListError):
            HostListLoader(str(tmp_path)).get_hosts()

    def test_undecodable_file(self, tmp_path):
        """测试无法解码的文件"""
        path = tmp_path / "hosts.bin"
        path.write_bytes(b"\xff\xfe\xfa example.com")

        with pytest.raises(HostListError):
            HostListLoader(str(path)).get_hosts()
