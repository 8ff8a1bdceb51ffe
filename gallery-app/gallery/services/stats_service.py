from gallery.config import MAX_IMAGE_BYTES

KB = 1024
BUCKET_WIDTH = 50 * KB


def _size_buckets():
    buckets = []
    for lower in range(0, MAX_IMAGE_BYTES, BUCKET_WIDTH):
        upper = lower + BUCKET_WIDTH
        buckets.append({
            "name": f"{lower // KB}-{upper // KB}KB",
            "min": lower,
            "max": upper,
            "count": 0,
        })
    return buckets


def get_size_distribution(images):
    """Count images per 50KB size range. Sizes past the last range land in it."""
    buckets = _size_buckets()
    for img in images:
        bucket = next((b for b in buckets if b["min"] <= img["size"] < b["max"]), buckets[-1])
        bucket["count"] += 1

    total = len(images)
    for b in buckets:
        b["percent"] = round(b["count"] * 100 / total, 1) if total else 0.0
    return buckets


def get_top_image(images):
    """Most liked image; the earliest one wins a tie."""
    top = None
    for img in images:
        if top is None or img["like_count"] > top["like_count"]:
            top = img
    return top


def get_dashboard_stats(images):
    """Aggregate like and size statistics over image dicts from get_images_with_likes."""
    total_likes = sum(img["like_count"] for img in images)
    total_size = sum(img["size"] for img in images)
    return {
        "total_images": len(images),
        "total_size": total_size,
        "total_likes": total_likes,
        "avg_likes": round(total_likes / len(images), 1) if images else 0.0,
        "top_image": get_top_image(images),
        "size_distribution": get_size_distribution(images),
        "likes_per_image": [
            {"id": img["id"], "original_name": img["original_name"], "likes": img["like_count"]}
            for img in images
        ],
    }
