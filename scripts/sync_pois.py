"""
把已审阅的景点研究结果同步到网站行程的 pointsOfInterest
"""

from dotenv import load_dotenv

from tourcms.api.service import SITE_ITINERARY
from tourcms.config.config import Config
from tourcms.core.cms_export import sync_pois_to_itinerary
from tourcms.core.document_store import JsonDocumentStore


def main():
    load_dotenv()
    config = Config()
    site = JsonDocumentStore(config.site_data_dir)
    poi_store = JsonDocumentStore(config.content_data_dir / "poi")

    itinerary = site.load(SITE_ITINERARY)
    if not itinerary:
        print("网站行程不存在")
        return

    poi_docs = {day: poi_store.load_day("poi", day) for day in poi_store.list_days("poi")}
    if not poi_docs:
        print("没有景点审阅结果")
        return

    updated, missing = sync_pois_to_itinerary(itinerary, poi_docs)
    site.save(SITE_ITINERARY, itinerary)
    print(f"已同步 {len(updated)} 天: {updated}")
    if missing:
        print(f"行程中不存在的天: {missing}")


if __name__ == "__main__":
    main()
