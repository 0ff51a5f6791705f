"""
按内容管理行程的片段重新生成全部图片研究数据
"""

from dotenv import load_dotenv

from tourcms.agents.image_research import ImageResearcher
from tourcms.api.service import CONTENT_ITINERARY
from tourcms.config.config import Config
from tourcms.core.document_store import JsonDocumentStore
from tourcms.search.aggregator import ImageSearchService


def main():
    load_dotenv()
    config = Config()
    itinerary = JsonDocumentStore(config.content_data_dir).load(CONTENT_ITINERARY)
    if not itinerary or not itinerary.get("days"):
        print("内容管理行程为空")
        return

    researcher = ImageResearcher(ImageSearchService.from_config(config), config.research_dir)
    totals = researcher.regenerate_research(itinerary)
    print(f"完成！{totals['days']} 天，{totals['activities']} 个活动，{totals['images']} 张图片")


if __name__ == "__main__":
    main()
