"""
把内容管理行程（含图片选择）导出为网站行程 itinerary-v2
"""

import argparse

from dotenv import load_dotenv

from tourcms.api.service import CONTENT_ITINERARY, SITE_ITINERARY
from tourcms.config.config import Config
from tourcms.core.cms_export import export_cms1_to_cms2
from tourcms.core.document_store import JsonDocumentStore


def main():
    parser = argparse.ArgumentParser(description="导出内容管理行程到网站")
    parser.add_argument("--dry-run", action="store_true", help="只统计，不写入")
    args = parser.parse_args()

    load_dotenv()
    config = Config()
    content = JsonDocumentStore(config.content_data_dir)
    selections = JsonDocumentStore(config.content_data_dir / "selections")

    itinerary = content.load(CONTENT_ITINERARY)
    if not itinerary:
        print("内容管理行程不存在")
        return

    selections_by_day = {day: selections.load_day("selections", day) for day in selections.list_days("selections")}
    output, summary = export_cms1_to_cms2(itinerary, selections_by_day)
    print(f"天数: {summary['days']}  片段: {summary['segments']}  图片: {summary['images']}")

    if args.dry_run:
        return
    path = JsonDocumentStore(config.site_data_dir).save(SITE_ITINERARY, output)
    print(f"已写入: {path}")


if __name__ == "__main__":
    main()
