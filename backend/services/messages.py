"""
Invitation message templates and WhatsApp links
"""
from datetime import date
from typing import Optional
from urllib.parse import urlencode

from core.config import WHATSAPP_SEND_URL
from models.wedding import WeddingData, WeddingEvent

MESSAGE_TEMPLATES = {
    "id": """Yth. Bapak/Ibu/Saudara/i
*{nama_tamu}*
Di tempat
——————————————
Dengan sukacita, kami mengundang Bapak/Ibu/Saudara/i untuk hadir pada acara:
✨Pernikahan✨
*{nama_mempelai_pria} & {nama_mempelai_wanita}*

*Pemberkatan Nikah*
🗓️ {tanggal_pemberkatan}
🕛 {waktu_pemberkatan}
📍 {lokasi_pemberkatan}

Resepsi Pernikahan
🗓️ {tanggal_resepsi}
🕛 {waktu_resepsi}
📍 {lokasi_resepsi}

Undangan digital dapat diakses melalui:
{tautan_undangan}

Merupakan kehormatan bagi kami apabila Bapak/Ibu/Saudara/i berkenan hadir dan memberikan doa restu. 🙏

Hormat kami,
{nama_mempelai_pria} & {nama_mempelai_wanita}""",
    "en": """Dear Mr./Mrs./Ms.
*{nama_tamu}*
Present
——————————————
With joy, we invite you to attend our wedding:
✨ {nama_mempelai_pria} & {nama_mempelai_wanita} ✨

Wedding Ceremony
🗓️ {tanggal_pemberkatan}
🕛 {waktu_pemberkatan}
📍 {lokasi_pemberkatan}

Wedding Reception
🗓️ {tanggal_resepsi}
🕛 {waktu_resepsi}
📍 {lokasi_resepsi}

The digital invitation can be accessed via:
{tautan_undangan}

It would be our honor if you could attend and give your blessing. 🙏

Sincerely,
{nama_mempelai_pria} & {nama_mempelai_wanita}""",
}

# Monday first, matching date.weekday()
WEEKDAY_NAMES = {
    "id": ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"],
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
}
MONTH_NAMES = {
    "id": ["Januari", "Februari", "Maret", "April", "Mei", "Juni", "Juli",
           "Agustus", "September", "Oktober", "November", "Desember"],
    "en": ["January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December"],
}


def format_date(value: str, language: str = "id") -> str:
    """'2024-06-15' -> 'Sabtu, 15 Juni 2024' or 'Saturday, June 15, 2024'"""
    try:
        parsed = date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return value or ""
    lang = language if language in WEEKDAY_NAMES else "id"
    weekday = WEEKDAY_NAMES[lang][parsed.weekday()]
    month = MONTH_NAMES[lang][parsed.month - 1]
    if lang == "en":
        return f"{weekday}, {month} {parsed.day}, {parsed.year}"
    return f"{weekday}, {parsed.day} {month} {parsed.year}"


def format_time(value: str) -> str:
    """'08:00' -> '08.00 WIB'"""
    if not value:
        return ""
    hours, _, minutes = value.partition(":")
    return f"{hours}.{minutes[:2] or '00'} WIB"


def format_location(event: Optional[WeddingEvent]) -> str:
    if not event:
        return ""
    return f"{event.venue}, {event.address}" if event.address else event.venue


def guest_display_name(guest: dict) -> str:
    title = guest.get("title")
    return f"{title} {guest['name']}" if title else guest["name"]


def invitation_link(site_url: str, slug: str) -> str:
    return f"{site_url.rstrip('/')}/guest/{slug}"


def build_message(guest: dict, wedding_data: WeddingData, site_url: str) -> str:
    """Fill the guest's language template with guest and event details"""
    language = guest.get("language") if guest.get("language") in MESSAGE_TEMPLATES else "id"
    events = wedding_data.events
    ceremony = events[0] if events else None
    reception = events[1] if len(events) > 1 else ceremony

    values = {
        "nama_tamu": guest_display_name(guest),
        "nama_mempelai_pria": wedding_data.couple.groom.name,
        "nama_mempelai_wanita": wedding_data.couple.bride.name,
        "tanggal_pemberkatan": format_date(ceremony.date, language) if ceremony else "",
        "waktu_pemberkatan": format_time(ceremony.time) if ceremony else "",
        "lokasi_pemberkatan": format_location(ceremony),
        "tanggal_resepsi": format_date(reception.date, language) if reception else "",
        "waktu_resepsi": format_time(reception.time) if reception else "",
        "lokasi_resepsi": format_location(reception),
        "tautan_undangan": invitation_link(site_url, guest["slug"]),
    }

    text = MESSAGE_TEMPLATES[language]
    for key, value in values.items():
        text = text.replace(f"{{{key}}}", value)
    return text


def build_whatsapp_url(phone: str, text: str) -> str:
    return f"{WHATSAPP_SEND_URL}?{urlencode({'phone': phone, 'text': text})}"
