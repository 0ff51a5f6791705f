"""
把外链图片下载到站点图片目录并改写为本地路径

用法:
    python scripts/migrate_images.py site
    python scripts/migrate_images.py selections
    python scripts/migrate_images.py all
"""

import json
import argparse

from dotenv import load_dotenv

from tourcms.api.service import SITE_ITINERARY
from tourcms.config.config import Config
from tourcms.core.document_store import JsonDocumentStore
from tourcms.core.image_migration import migrate_selection_images, migrate_site_images


def migrate_site(config):
    store = JsonDocumentStore(config.site_data_dir)
    itinerary = store.load(SITE_ITINERARY)
    if not itinerary:
        print("网站行程不存在，跳过")
        return None

    report = migrate_site_images(itinerary.get("days") or [], config.site_images_dir)
    if report.success:
        store.save(SITE_ITINERARY, itinerary)
    return report


def migrate_selections(config):
    store = JsonDocumentStore(config.content_data_dir / "selections")
    docs = [store.load_day("selections", day) for day in store.list_days("selections")]
    report = migrate_selection_images(docs, config.site_images_dir)
    for doc in docs:
        store.save_day("selections", doc["day"], doc)
    return report


def main():
    parser = argparse.ArgumentParser(description="迁移外链图片到本地")
    parser.add_argument("target", choices=["site", "selections", "all"])
    args = parser.parse_args()

    load_dotenv()
    config = Config()

    reports = {}
    if args.target in ("site", "all"):
        reports["site"] = migrate_site(config)
    if args.target in ("selections", "all"):
        reports["selections"] = migrate_selections(config)

    for name, report in reports.items():
        if report is not None:
            print(f"{name}: {json.dumps(report.to_dict(), ensure_ascii=False, indent=2)}")


if __name__ == "__main__":
    main()
