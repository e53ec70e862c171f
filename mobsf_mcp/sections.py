"""Top-level section names of a MobSF JSON report.

Each name gets a dedicated ``getJsonSection_<name>`` tool. Reports may carry
keys outside this list; those are still reachable via ``getJsonReportSection``.
"""

JSON_SECTIONS: tuple[str, ...] = (
    # File identity
    "version",
    "title",
    "file_name",
    "app_name",
    "app_type",
    "size",
    "md5",
    "sha1",
    "sha256",
    # Manifest
    "package_name",
    "main_activity",
    "exported_activities",
    "browsable_activities",
    "activities",
    "receivers",
    "providers",
    "services",
    "libraries",
    "target_sdk",
    "max_sdk",
    "min_sdk",
    "version_name",
    "version_code",
    "permissions",
    "malware_permissions",
    # Analysis results
    "certificate_analysis",
    "manifest_analysis",
    "network_security",
    "binary_analysis",
    "file_analysis",
    "android_api",
    "code_analysis",
    "niap_analysis",
    "permission_mapping",
    "urls",
    "domains",
    "emails",
    "strings",
    "firebase_urls",
    "exported_count",
    "apkid",
    "behaviour",
    "trackers",
    "playstore_details",
    "secrets",
    "logs",
    "sbom",
    "average_cvss",
    "appsec",
    "virus_total",
    # Server context
    "base_url",
    "dwd_dir",
    "host_os",
)
