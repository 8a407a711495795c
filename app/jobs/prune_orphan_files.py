"""清理孤儿图片文件的本地执行脚本

上传中途失败或手工删库时，上传目录里可能残留没有任何
product_images 记录引用的文件，本脚本负责找出并删除它们。
"""

import argparse
import logging
import time

from sqlalchemy import select

from app.core.config import settings
from app.db.session import SessionLocal
from app.models.product_images import ProductImage
from app.services.storage import LocalImageStorage

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# 上传请求先写文件再提交记录，新文件在宽限期内不视为孤儿
DEFAULT_MIN_AGE_SECONDS = 300


def find_orphan_files(db, storage: LocalImageStorage,
                      min_age_seconds: float = DEFAULT_MIN_AGE_SECONDS) -> list:
    """返回磁盘上存在但没有记录引用的文件名

    先列出文件再查询记录：列出之后才写入的文件不会出现在候选里，
    列出之前已写入、记录稍后提交的文件由宽限期保护。
    """
    candidates = storage.list_files()
    cutoff = time.time() - min_age_seconds

    referenced = set()
    for url in db.execute(select(ProductImage.url)).scalars():
        if storage.is_managed(url):
            referenced.add(storage.path_for(url).name)

    orphans = []
    for name in candidates:
        if name in referenced:
            continue
        try:
            mtime = (storage.directory / name).stat().st_mtime
        except FileNotFoundError:
            continue
        if mtime > cutoff:
            logger.debug(f"跳过宽限期内的新文件: {name}")
            continue
        orphans.append(name)
    return orphans


def run_prune(dry_run: bool = False, storage: LocalImageStorage = None,
              min_age_seconds: float = DEFAULT_MIN_AGE_SECONDS) -> int:
    """执行孤儿文件清理

    Args:
        dry_run: 是否为试运行模式（只统计不删除）
        storage: 图片存储，默认使用配置中的上传目录
        min_age_seconds: 文件最短存在时间，更新的文件跳过
    """
    storage = storage or LocalImageStorage(settings.UPLOADS_ROOT, settings.UPLOADS_URL_PREFIX)
    db = SessionLocal()
    try:
        orphans = find_orphan_files(db, storage, min_age_seconds)
        if dry_run:
            logger.info(f"试运行模式：发现 {len(orphans)} 个孤儿文件")
            return len(orphans)

        removed = 0
        for name in orphans:
            if storage.remove(storage.url_for(name)):
                removed += 1
        logger.info(f"清理完成：删除 {removed}/{len(orphans)} 个孤儿文件")
        return removed
    except Exception as e:
        logger.error(f"清理执行失败: {str(e)}")
        raise
    finally:
        db.close()


def main():
    """主函数"""
    parser = argparse.ArgumentParser(description='商品图片孤儿文件清理工具')
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='试运行模式，只统计不删除'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='详细输出模式'
    )
    parser.add_argument(
        '--min-age',
        type=float,
        default=DEFAULT_MIN_AGE_SECONDS,
        help='文件最短存在秒数，更新的文件不清理（默认 300）'
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        result = run_prune(dry_run=args.dry_run, min_age_seconds=args.min_age)
        if args.dry_run:
            print(f"📊 试运行结果：发现 {result} 个孤儿文件")
        else:
            print(f"✅ 清理完成：删除了 {result} 个文件")
    except Exception as e:
        print(f"❌ 执行失败: {str(e)}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
