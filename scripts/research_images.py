"""
图片研究脚本
按亮点为网站行程的某天搜索图片，生成研究 JSON 和 HTML 预览

用法:
    python scripts/research_images.py 3
"""

import argparse

from dotenv import load_dotenv

from tourcms.agents.image_research import ImageResearcher
from tourcms.api.service import SITE_ITINERARY
from tourcms.config.config import Config
from tourcms.core.document_store import JsonDocumentStore
from tourcms.core.site_builder import transform_itinerary
from tourcms.search.aggregator import ImageSearchService


def main():
    parser = argparse.ArgumentParser(description="为某天的亮点研究图片")
    parser.add_argument("day", type=int, help="天数")
    args = parser.parse_args()

    load_dotenv()
    config = Config()
    days = transform_itinerary(JsonDocumentStore(config.site_data_dir).load(SITE_ITINERARY))
    day = next((d for d in days if d.get("day") == args.day), None)
    if day is None:
        print(f"行程中没有第 {args.day} 天")
        return

    researcher = ImageResearcher(ImageSearchService.from_config(config), config.research_dir)
    research = researcher.research_day(day)
    json_path, html_path = researcher.save_day(research)

    total = sum(len(a["images"]) for a in research["activities"])
    print(f"第 {args.day} 天: {len(research['activities'])} 个亮点，{total} 张图片")
    print(f"  JSON: {json_path}")
    print(f"  预览: {html_path}")


if __name__ == "__main__":
    main()
