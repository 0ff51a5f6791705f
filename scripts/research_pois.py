"""
景点研究脚本
对网站行程中的某天（或全部天）运行景点研究，生成 JSON 结果和 HTML 审阅页

用法:
    python scripts/research_pois.py 3
    python scripts/research_pois.py all
"""

import argparse

from dotenv import load_dotenv

from tourcms.agents.poi_research import PoiResearchAgent
from tourcms.api.service import SITE_ITINERARY
from tourcms.config.config import Config
from tourcms.core.document_store import JsonDocumentStore
from tourcms.core.site_builder import transform_itinerary


def main():
    parser = argparse.ArgumentParser(description="研究行程中的景点")
    parser.add_argument("day", help="天数，或 all 表示全部")
    parser.add_argument("--api-base", default="http://localhost:8000", help="审阅页保存结果时调用的API地址")
    args = parser.parse_args()

    load_dotenv()
    config = Config()
    days = transform_itinerary(JsonDocumentStore(config.site_data_dir).load(SITE_ITINERARY))
    if not days:
        print("网站行程为空，请先保存 itinerary-v2")
        return

    if args.day != "all":
        days = [d for d in days if str(d.get("day")) == args.day]
        if not days:
            print(f"行程中没有第 {args.day} 天")
            return

    agent = PoiResearchAgent(config)
    if not agent.llm_configured:
        print("⚠️ 未配置 OPENAI_API_KEY，只生成占位内容")

    for day in days:
        research = agent.research_day(day)
        json_path, html_path = agent.save(research, api_base=args.api_base)
        print(f"第 {day['day']} 天: {len(research['pois'])} 个景点")
        print(f"  JSON: {json_path}")
        print(f"  审阅页: {html_path}")


if __name__ == "__main__":
    main()
