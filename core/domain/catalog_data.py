"""
Static lifecycle event reference data.

Based on the KCDC national immunization schedule and the national health
screening programme. Rows are raw mappings; ``EventCatalog.from_rows``
validates them once at process start.
"""

from typing import Any

CATALOG_VERSION = "2024.1"

DEFAULT_CATALOG_ROWS: tuple[dict[str, Any], ...] = (
    # Infant vaccinations (0-6 years)
    {
        "event_code": "hepatitis_b_1st",
        "event_name": "B형 간염 1차",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 0,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 7,
        "description": "출생 직후 접종하는 B형 간염 1차 예방접종입니다.",
    },
    {
        "event_code": "hepatitis_b_2nd",
        "event_name": "B형 간염 2차",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 1,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 7,
        "description": "1개월 시 접종하는 B형 간염 2차 예방접종입니다.",
    },
    {
        "event_code": "dtap_2months",
        "event_name": "5가 혼합백신 (2개월)",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 2,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 7,
        "description": "디프테리아, 파상풍, 백일해, 폴리오, 뇌수막염 예방 백신입니다.",
    },
    {
        "event_code": "dtap_4months",
        "event_name": "5가 혼합백신 (4개월)",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 4,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 7,
        "description": "디프테리아, 파상풍, 백일해, 폴리오, 뇌수막염 예방 백신 2차입니다.",
    },
    {
        "event_code": "infant_checkup_4months",
        "event_name": "영유아 건강검진 (4-6개월)",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_months": 4,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "medium",
        "notification_lead_days": 14,
        "description": "생후 4-6개월에 받는 영유아 건강검진 1차입니다.",
    },
    {
        "event_code": "dtap_6months",
        "event_name": "5가 혼합백신 (6개월)",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 6,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 7,
        "description": "디프테리아, 파상풍, 백일해, 폴리오, 뇌수막염 예방 백신 3차입니다.",
    },
    {
        "event_code": "hepatitis_b_3rd",
        "event_name": "B형 간염 3차",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 6,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 7,
        "description": "6개월 시 접종하는 B형 간염 3차 예방접종입니다.",
    },
    {
        "event_code": "infant_checkup_9months",
        "event_name": "영유아 건강검진 (9-12개월)",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_months": 9,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "medium",
        "notification_lead_days": 14,
        "description": "생후 9-12개월에 받는 영유아 건강검진 2차입니다.",
    },
    {
        "event_code": "mmr_12months",
        "event_name": "MMR (홍역, 유행성이하선염, 풍진)",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 12,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 14,
        "description": "12-15개월 시 접종하는 MMR 백신입니다.",
    },
    {
        "event_code": "chickenpox_12months",
        "event_name": "수두 예방접종",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 12,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 14,
        "description": "12-15개월 시 접종하는 수두 예방접종입니다.",
    },
    {
        "event_code": "hepatitis_a_12months",
        "event_name": "A형 간염 1차",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 12,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "medium",
        "notification_lead_days": 14,
        "description": "12-23개월 사이에 접종하는 A형 간염 1차 예방접종입니다.",
    },
    {
        "event_code": "japanese_encephalitis_12months",
        "event_name": "일본뇌염 예방접종",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 12,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "medium",
        "notification_lead_days": 14,
        "description": "12-23개월 사이에 접종을 시작하는 일본뇌염 예방접종입니다.",
        "requires_user_choice": True,
    },
    {
        "event_code": "dtap_15months",
        "event_name": "DTaP 4차",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_months": 15,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 14,
        "description": "15-18개월 시 접종하는 디프테리아, 파상풍, 백일해 추가 접종입니다.",
    },
    {
        "event_code": "infant_checkup_18months",
        "event_name": "영유아 건강검진 (18-24개월)",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_months": 18,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "medium",
        "notification_lead_days": 14,
        "description": "생후 18-24개월에 받는 영유아 건강검진 3차입니다. 구강검진을 함께 받을 수 있습니다.",
    },
    {
        "event_code": "infant_checkup_30months",
        "event_name": "영유아 건강검진 (30-36개월)",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_months": 30,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "medium",
        "notification_lead_days": 14,
        "description": "생후 30-36개월에 받는 영유아 건강검진 4차입니다.",
    },
    {
        "event_code": "mmr_4years",
        "event_name": "MMR 2차",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_years": 4,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 14,
        "description": "4-6세 시 접종하는 MMR 2차 백신입니다.",
    },
    {
        "event_code": "dtap_ipv_4years",
        "event_name": "DTaP-IPV 추가 접종",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_years": 4,
        "target_gender": "both",
        "applicable_stages": ["infant"],
        "importance": "high",
        "notification_lead_days": 14,
        "description": "4-6세 시 접종하는 디프테리아, 파상풍, 백일해, 폴리오 추가 접종입니다.",
    },
    # Adolescent vaccinations (11-18 years)
    {
        "event_code": "hpv_12years",
        "event_name": "HPV (사람유두종바이러스) 예방접종",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_years": 12,
        "target_gender": "both",
        "applicable_stages": ["adolescent"],
        "importance": "high",
        "notification_lead_days": 30,
        "description": "성병 및 자궁경부암 예방을 위해 남녀 모두 접종 권장 (만 12세 전후 최적).",
        "has_professional_info": True,
    },
    {
        "event_code": "tdap_11years",
        "event_name": "Tdap (파상풍, 디프테리아, 백일해)",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_years": 11,
        "target_gender": "both",
        "applicable_stages": ["adolescent"],
        "importance": "medium",
        "notification_lead_days": 14,
        "description": "만 11-12세에 1회 추가 접종하는 Tdap 백신입니다.",
    },
    # Adult vaccinations (19-64 years)
    {
        "event_code": "tetanus_10years",
        "event_name": "파상풍 추가 접종",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_years": 19,
        "target_gender": "both",
        "applicable_stages": ["adult"],
        "importance": "medium",
        "notification_lead_days": 30,
        "description": "10년에 한 번씩 추가 접종이 필요한 파상풍 백신입니다.",
    },
    {
        "event_code": "flu_annual",
        "event_name": "독감 예방접종",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_years": 19,
        "target_gender": "both",
        "applicable_stages": ["adult", "elderly"],
        "importance": "high",
        "notification_lead_days": 14,
        "description": "매년 가을(10-11월)에 접종하는 독감 예방접종입니다.",
    },
    # Elderly vaccinations (65+ years)
    {
        "event_code": "pneumococcal_65years",
        "event_name": "폐렴구균 예방접종",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_years": 65,
        "target_gender": "both",
        "applicable_stages": ["elderly"],
        "importance": "high",
        "notification_lead_days": 30,
        "description": "노년기 합병증 예방을 위해 반드시 권장되는 폐렴구균 예방접종입니다.",
    },
    {
        "event_code": "shingles_50years",
        "event_name": "대상포진 예방접종",
        "event_type": "vaccination",
        "category": "kcdc",
        "target_age_years": 50,
        "target_gender": "both",
        "applicable_stages": ["adult", "elderly"],
        "importance": "medium",
        "notification_lead_days": 30,
        "description": "50-60세 이후 1회(생백신) 또는 2회(사백신) 접종하는 대상포진 예방접종입니다.",
        "requires_user_choice": True,
    },
    # Health checkups
    {
        "event_code": "cervical_cancer_20years",
        "event_name": "자궁경부암 검진",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_years": 20,
        "target_gender": "female",
        "applicable_stages": ["adult", "elderly"],
        "importance": "high",
        "notification_lead_days": 30,
        "description": "20세 이상 여성이 2년마다 받는 자궁경부암 검진입니다.",
    },
    {
        "event_code": "national_checkup_40years",
        "event_name": "국가건강검진 (40세 이상)",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_years": 40,
        "target_gender": "both",
        "applicable_stages": ["adult"],
        "importance": "high",
        "notification_lead_days": 30,
        "description": "40세 이상부터 2년마다 받는 국가건강검진입니다.",
    },
    {
        "event_code": "cancer_screening_40years",
        "event_name": "암 검진 (40세 이상)",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_years": 40,
        "target_gender": "both",
        "applicable_stages": ["adult"],
        "importance": "high",
        "notification_lead_days": 30,
        "description": "40세 이상부터 시작하는 암 검진입니다.",
        "has_professional_info": True,
    },
    {
        "event_code": "breast_cancer_40years",
        "event_name": "유방암 검진",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_years": 40,
        "target_gender": "female",
        "applicable_stages": ["adult", "elderly"],
        "importance": "high",
        "notification_lead_days": 30,
        "description": "40세 이상 여성이 2년마다 받는 유방촬영 검진입니다.",
    },
    {
        "event_code": "prostate_checkup_50years",
        "event_name": "전립선 건강 검진",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_years": 50,
        "target_gender": "male",
        "applicable_stages": ["adult", "elderly"],
        "importance": "medium",
        "notification_lead_days": 30,
        "description": "50세 이상 남성에게 권장되는 전립선 특이항원(PSA) 검사입니다.",
        "requires_user_choice": True,
    },
    {
        "event_code": "osteoporosis_54years",
        "event_name": "골다공증 검사",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_years": 54,
        "target_gender": "female",
        "applicable_stages": ["adult", "elderly"],
        "importance": "medium",
        "notification_lead_days": 30,
        "description": "54세, 60세, 66세 여성을 대상으로 하는 골밀도 검사입니다.",
    },
    {
        "event_code": "senior_transition_checkup_66years",
        "event_name": "노인 생애전환기 건강진단",
        "event_type": "health_checkup",
        "category": "checkup",
        "target_age_years": 66,
        "target_gender": "both",
        "applicable_stages": ["elderly"],
        "importance": "high",
        "notification_lead_days": 30,
        "description": "66세에 받는 노인 생애전환기 건강진단입니다. 인지기능 및 낙상 위험 평가가 포함됩니다.",
        "has_professional_info": True,
    },
)
