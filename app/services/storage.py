"""本地图片存储"""

import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

PRODUCT_SUBDIR = "products"


class LocalImageStorage:
    """商品图片的本地文件存储

    文件写入 <root>/products/ 目录，对外地址为 <url_prefix>/products/<filename>。
    只有以该前缀开头的地址才被视为本地托管文件。
    """

    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.directory = self.root / PRODUCT_SUBDIR
        self.url_prefix = f"{url_prefix.rstrip('/')}/{PRODUCT_SUBDIR}/"

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def url_for(self, filename: str) -> str:
        return f"{self.url_prefix}{filename}"

    def is_managed(self, url: str) -> bool:
        return bool(url) and url.startswith(self.url_prefix)

    def path_for(self, url: str) -> Path:
        # 只取文件名，避免路径穿越
        return self.directory / os.path.basename(url)

    def save(self, filename: str, content: bytes) -> str:
        """写入文件并返回访问地址"""
        self.ensure_directory()
        path = self.directory / filename
        with open(path, "wb") as f:
            f.write(content)
        logger.debug(f"Saved image file {path} ({len(content)} bytes)")
        return self.url_for(filename)

    def remove(self, url: str) -> bool:
        """尽力删除本地文件，失败只记录日志

        Returns:
            是否实际删除了文件
        """
        if not self.is_managed(url):
            return False

        path = self.path_for(url)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Image file already absent: {path}")
            return False
        except OSError as e:
            logger.warning(f"Failed to remove image file {path}: {e}")
            return False

        logger.debug(f"Removed image file {path}")
        return True

    def list_files(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.name for p in self.directory.iterdir() if p.is_file())
