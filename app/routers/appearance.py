# =============================================================================
# app/routers/appearance.py - Home, Contact and Appearance Endpoints
# =============================================================================
# Public:
#   GET /               - home page: header, category cards, latest news
#   GET /contact        - company contact block, social links, map embed
#   GET /appearance     - the full appearance record
#
# Admin (mounted under /admin/dashboard, sign-in required):
#   GET /appearance
#   PUT /appearance     - merge the given fields and save the record
# =============================================================================

from fastapi import APIRouter

from app.dependencies import MediaDep, StoresDep
from core.models import Appearance, AppearanceUpdate
from core.services.media_service import IMAGE_BUCKET, VIDEO_BUCKET

router = APIRouter()
admin_router = APIRouter()

# Number of published articles shown on the home page
HOME_NEWS_COUNT = 3


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("/")
async def home(stores: StoresDep, media: MediaDep):
    """Everything the home page shows."""
    appearance = stores.appearance.appearance

    categories = []
    for category, fruit in stores.fruits.fruit_data.items():
        categories.append({
            "category": category.value,
            "name": fruit.name,
            "image": media.get_correct_public_url(
                appearance.category_images.get(category.value, ""), IMAGE_BUCKET
            ),
            "icon": media.get_correct_public_url(
                appearance.category_icons.get(category.value, ""), IMAGE_BUCKET
            ),
        })

    return {
        "header": {
            "image": media.get_correct_public_url(appearance.header_image, IMAGE_BUCKET),
            "video": media.get_correct_public_url(appearance.header_video, VIDEO_BUCKET),
            "useVideo": appearance.use_video,
            "title": appearance.header_title,
            "subtitle": appearance.header_subtitle,
        },
        "logo": media.get_correct_public_url(appearance.logo, IMAGE_BUCKET),
        "banner": media.get_correct_public_url(appearance.homepage_banner, IMAGE_BUCKET),
        "categories": categories,
        "latestNews": stores.news.published_articles()[:HOME_NEWS_COUNT],
    }


@router.get("/contact")
async def contact(stores: StoresDep):
    appearance = stores.appearance.appearance
    return {
        "companyName": appearance.company_name,
        "address": appearance.address,
        "phone": appearance.phone,
        "email": appearance.email,
        "website": appearance.website,
        "socialMedia": appearance.social_media,
        "mapsEmbedUrl": appearance.maps_embed_url,
    }


@router.get("/appearance", response_model=Appearance)
async def get_public_appearance(stores: StoresDep):
    return stores.appearance.appearance


# =============================================================================
# Admin Endpoints
# =============================================================================

@admin_router.get("/appearance", response_model=Appearance)
async def get_appearance(stores: StoresDep):
    return stores.appearance.appearance


@admin_router.put("/appearance", response_model=Appearance)
def update_appearance(changes: AppearanceUpdate, stores: StoresDep):
    """
    Save the appearance.

    Updates the existing row, or inserts the first one.
    """
    return stores.appearance.update_appearance(changes)
