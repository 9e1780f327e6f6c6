ISSUANCE_CAP = 2

CLIENT_KEY_PREFIX = "cert_stats_"
GENERIC_CLIENT_KEY = f"{CLIENT_KEY_PREFIX}generic"

IP_LOOKUP_URL = "https://api.ipify.org?format=json"

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = "gemini-3-flash-preview"
GENERATION_TEMPERATURE = 0.7
GENERATION_MAX_OUTPUT_TOKENS = 100

DEFAULT_GENERATED_MESSAGE = (
    "Bilimsel araştırmalarımıza sunduğunuz değerli katkılar için teşekkür ederiz."
)

IMPACT_PROMPT_TEMPLATE = (
    "Gönüllü ismi: {name}. Bu kişi bir bilimsel araştırmaya gönüllü olarak destek verdi. "
    "Lütfen bu kişiye araştırmaya katkılarından dolayı çok kısa (maksimum 15 kelime), "
    "profesyonel ve içten bir teşekkür mesajı yaz (Türkçe). "
    'Örneğin: "Katkılarınız, veri analizi sürecimize ışık tuttu ve bilimin '
    'ilerlemesine yardımcı oldu."'
)

# Mirrors per weight, in priority order.
REGULAR_FONT_URLS: tuple[str, ...] = (
    "https://cdnjs.cloudflare.com/ajax/libs/pdfmake/0.1.66/fonts/Roboto/Roboto-Regular.ttf",
    "https://fonts.gstatic.com/s/roboto/v30/KFOmCnqEu92Fr1Me5Q.ttf",
)
BOLD_FONT_URLS: tuple[str, ...] = (
    "https://cdnjs.cloudflare.com/ajax/libs/pdfmake/0.1.66/fonts/Roboto/Roboto-Medium.ttf",
    "https://fonts.gstatic.com/s/roboto/v30/KFOlCnqEu92Fr1MmWUlfBBc4.ttf",
)

FONT_FAMILY = "Roboto"
FONT_REGULAR = "Roboto"
FONT_BOLD = "Roboto-Bold"
FALLBACK_FONT_REGULAR = "Times-Roman"
FALLBACK_FONT_BOLD = "Times-Bold"

DEFAULT_INSTITUTION = "Tıpta Profesyonellik Bloğu"
DEFAULT_UNIT = "Bilimsel Araştırmalar ve Uygulamalar"
DEFAULT_COORDINATOR_TITLE = "Koordinatör"

CERTIFICATE_TITLE = "GÖNÜLLÜ KATILIM SERTİFİKASI"
INTRO_TEXT = (
    "Bu sertifika, yürütülen bilimsel çalışmalara gönüllü katılımı ve sunduğu "
    "değerli katkılar nedeniyle aşağıda adı yazılı katılımcıya takdim edilmiştir."
)
DEFAULT_IMPACT_TEXT = (
    "Katkılarınız, araştırma sürecimizin niteliğini ve güvenilirliğini güçlendirmiştir."
)
CLOSING_TEXT = (
    "Sayın katılımcımıza teşekkür eder, akademik ve mesleki yaşamında "
    "başarılarının devamını dileriz."
)
ISSUE_DATE_LABEL = "Düzenlenme Tarihi"
CERTIFICATE_NO_LABEL = "Belge No"

FILE_NAME_SUFFIX = "GonulluKatilimSertifikasi"
FALLBACK_FILE_STEM = "katilimci"

ISSUE_DATE_FORMAT = "%d.%m.%Y"

MESSAGE_LIMIT_REACHED = (
    "Üzgünüz, bu cihazdan maksimum {cap} sertifika oluşturma limitine ulaştınız."
)
MESSAGE_DELIVERY_FAILED = (
    "Sertifika PDF dosyası oluşturulurken bir hata oluştu. "
    "Lütfen internet bağlantınızı kontrol edip tekrar deneyin."
)
MESSAGE_NAME_REQUIRED = "Lütfen adınızı ve soyadınızı girin."
MESSAGE_SUCCESS = "Sertifikanız başarıyla oluşturuldu ve indirildi!"
