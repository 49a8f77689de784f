"""
Wedding data loading
"""
import json
import logging
from pathlib import Path

from core.config import WEDDING_DATA_FILE
from models.wedding import WeddingData

logger = logging.getLogger(__name__)

DEFAULT_WEDDING_DATA = {
    "id": "1",
    "slug": "bambang-partini",
    "backgroundImage": "/assets/background-mobile.png",
    "desktopBackgroundImage": "/assets/background-desktop.png",
    "couple": {
        "groom": {
            "name": "Bambang",
            "fullName": "Bambang Sutrisno, S.Kom",
            "photo": "/assets/groom.png",
            "fatherName": "Bapak Sutrisno",
            "motherName": "Ibu Sartini",
            "childOrder": "Putra pertama",
            "instagram": "@bambang.sutrisno"
        },
        "bride": {
            "name": "Partini",
            "fullName": "Partini Wulandari, S.E",
            "photo": "/assets/bride.png",
            "fatherName": "Bapak Wulandono",
            "motherName": "Ibu Kartini",
            "childOrder": "Putri kedua",
            "instagram": "@partini.wulandari"
        }
    },
    "weddingDate": "2024-06-15T08:00:00.000Z",
    "quote": {
        "text": "And of His signs is that He created for you from yourselves mates "
                "that you may find tranquility in them; and He placed between you "
                "affection and mercy.",
        "source": "QS. Ar-Rum: 21"
    },
    "events": [
        {
            "id": "1",
            "name": "Pemberkatan Nikah",
            "date": "2024-06-15",
            "time": "08:00",
            "endTime": "10:00",
            "venue": "Gereja Santo Yakobus",
            "address": "Jl. Merdeka No. 123, Jakarta Selatan",
            "mapUrl": "https://maps.google.com/?q=-6.2088,106.8456"
        },
        {
            "id": "2",
            "name": "Resepsi",
            "date": "2024-06-15",
            "time": "11:00",
            "endTime": "14:00",
            "venue": "Gedung Serbaguna Permata",
            "address": "Perum Permata Hijau Blok F No. 45, Jakarta Selatan",
            "mapUrl": "https://maps.google.com/?q=-6.2188,106.8556"
        }
    ],
    "gallery": [
        {"id": "1", "src": "/assets/gallery/photo-1.png", "alt": "Prewedding photo 1",
         "width": 800, "height": 1200, "featured": True},
        {"id": "2", "src": "/assets/gallery/photo-2.png", "alt": "Prewedding photo 2",
         "width": 800, "height": 600}
    ],
    "loveStory": [
        {"id": "1", "title": "Pertama Bertemu", "date": "2020-01-15",
         "description": "Kami pertama kali bertemu di sebuah acara kampus."},
        {"id": "2", "title": "Lamaran", "date": "2023-12-25",
         "description": "Bambang melamar Partini dengan penuh ketulusan."}
    ],
    "gifts": [
        {"id": "1", "type": "bank", "name": "Bank Central Asia (BCA)",
         "accountNumber": "1234567890", "accountHolder": "Bambang Sutrisno"},
        {"id": "2", "type": "address", "name": "Alamat Pengiriman Kado",
         "address": "Perum Permata Hijau Blok F No. 45, Jakarta Selatan"}
    ],
    "theme": {
        "primaryColor": "#D4AF37",
        "secondaryColor": "#E8B4B8",
        "fontFamily": "Playfair Display"
    }
}


def load_wedding_data(path: str = WEDDING_DATA_FILE) -> WeddingData:
    """Wedding data from the configured JSON file, or the bundled default"""
    if path:
        logger.info(f"Loading wedding data from {path}")
        with Path(path).open(encoding="utf-8") as handle:
            return WeddingData.model_validate(json.load(handle))
    return WeddingData.model_validate(DEFAULT_WEDDING_DATA)
