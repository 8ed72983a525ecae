import os

from PIL import Image, ImageTk

from core.config import Config


class AssetManager:
    """Loads the image named by a tile's `asset` field, scaled to the hex."""

    def __init__(self, asset_dir=Config.ASSET_DIR):
        self.asset_dir = asset_dir
        self.image_cache = {}
        self.tk_cache = {}
        self.failed = set()

    def resolve(self, asset):
        if not asset:
            return None
        path = os.path.join(self.asset_dir, asset)
        if not os.path.isfile(path):
            return None
        return path

    def get_image(self, asset, width):
        """PIL image for `asset` resized to `width`, or None."""
        path = self.resolve(asset)
        if path is None or path in self.failed:
            return None
        target_w = max(1, int(width))
        key = (path, target_w)
        if key in self.image_cache:
            return self.image_cache[key]
        try:
            pil = Image.open(path)
            w_pct = target_w / float(pil.size[0])
            h_size = max(1, int(float(pil.size[1]) * float(w_pct)))
            pil = pil.resize((target_w, h_size), Image.Resampling.NEAREST)
        except (OSError, ValueError) as e:
            print(f"Error loading asset {asset}: {e}")
            self.failed.add(path)
            return None
        self.image_cache[key] = pil
        return pil

    def get_tk_image(self, asset, width):
        pil = self.get_image(asset, width)
        if pil is None:
            return None
        key = (asset, pil.size)
        if key not in self.tk_cache:
            self.tk_cache[key] = ImageTk.PhotoImage(pil)
        return self.tk_cache[key]

    def list_assets(self):
        if not os.path.exists(self.asset_dir):
            return []
        return sorted(
            f for f in os.listdir(self.asset_dir)
            if f.lower().endswith((".png", ".jpg", ".jpeg", ".gif"))
        )
