import socket
import logging

logger = logging.getLogger(__name__)


def get_local_ip() -> str:
    """
    获取本机局域网 IPv4 地址，供各部门电脑/手机访问。
    UDP connect 不会真正发包，只用于让系统选出出口网卡。
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("10.255.255.255", 1))
        ip = sock.getsockname()[0]
    except OSError as e:
        logger.debug(f"Unable to detect LAN address: {e}")
        ip = "localhost"
    finally:
        sock.close()
    if ip.startswith("127."):
        return "localhost"
    return ip
