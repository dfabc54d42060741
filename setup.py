from setuptools import find_packages, setup

setup(
    name="sd-backup-verify",
    version="0.1.0",
    description="以內容指紋驗證 SD 卡媒體檔案已完整備份到硬碟",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=[
        "tqdm>=4.50.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "sd-backup-verify=sd_backup_verify.main:main",
        ],
    },
)
