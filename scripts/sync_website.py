"""
把网站行程的标题和描述同步回内容管理行程
"""

from dotenv import load_dotenv

from tourcms.api.service import CONTENT_ITINERARY, SITE_ITINERARY
from tourcms.config.config import Config
from tourcms.core.cms_export import sync_website_to_cms
from tourcms.core.document_store import JsonDocumentStore
from tourcms.core.itinerary_editor import touch_metadata


def main():
    load_dotenv()
    config = Config()
    content = JsonDocumentStore(config.content_data_dir)
    website = JsonDocumentStore(config.site_data_dir).load(SITE_ITINERARY)
    cms = content.load(CONTENT_ITINERARY)
    if not website or not cms:
        print("网站行程或内容管理行程不存在")
        return

    updated = sync_website_to_cms(cms, website.get("days") or [])
    touch_metadata(cms)
    content.save(CONTENT_ITINERARY, cms)
    print(f"已同步 {len(updated)} 天")


if __name__ == "__main__":
    main()
