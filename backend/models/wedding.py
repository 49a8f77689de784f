"""
Wedding data payload served to the invitation site and message templates
"""
from pydantic import Field
from typing import Optional, List, Literal

from .schemas import CamelModel


class Person(CamelModel):
    name: str
    full_name: str
    photo: str
    father_name: str
    mother_name: str
    child_order: str
    instagram: Optional[str] = None


class Couple(CamelModel):
    bride: Person
    groom: Person


class WeddingEvent(CamelModel):
    """Ceremony or reception; date is YYYY-MM-DD and time HH:MM"""
    id: str
    name: str
    date: str
    time: str
    end_time: Optional[str] = None
    venue: str
    address: str = ""
    map_url: str = ""
    description: Optional[str] = None


class GalleryImage(CamelModel):
    id: str
    src: str
    alt: str
    width: int
    height: int
    featured: bool = False


class LoveStory(CamelModel):
    id: str
    title: str
    date: str
    description: str
    image: Optional[str] = None


class Gift(CamelModel):
    id: str
    type: Literal["bank", "ewallet", "address"]
    name: str
    account_number: Optional[str] = None
    account_holder: Optional[str] = None
    address: Optional[str] = None


class Quote(CamelModel):
    text: str
    source: str


class Music(CamelModel):
    url: str
    title: str
    artist: str


class Theme(CamelModel):
    primary_color: str = "#D4AF37"
    secondary_color: str = "#E8B4B8"
    font_family: str = "Playfair Display"


class WeddingData(CamelModel):
    """Full wedding payload"""
    id: str
    slug: str
    background_image: str = ""
    desktop_background_image: str = ""
    couple: Couple
    wedding_date: str
    quote: Quote
    events: List[WeddingEvent] = []
    gallery: List[GalleryImage] = []
    love_story: List[LoveStory] = []
    gifts: List[Gift] = []
    music: Optional[Music] = None
    theme: Theme = Field(default_factory=Theme)
