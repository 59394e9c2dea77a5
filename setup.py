from setuptools import setup


setup(
    version="0.1.0",
    name="rcl-backend",
    description="flask app for report lifecycle management with the DCF",
    install_requires=[
        "flask==3.*",
        "requests==2.*",
        "PyYAML==6.*",
        "data-plumber-http>=1.0.0,<2",
        "dcm-common[services, db]>=4.0.0,<5",
    ],
    packages=[
        "rcl_backend",
        "rcl_backend.components",
        "rcl_backend.components.dcf_client",
        "rcl_backend.extensions",
        "rcl_backend.models",
        "rcl_backend.views",
    ],
    package_data={
        "rcl_backend": ["init.sql", "openapi.yaml"],
    },
    extras_require={
        "cors": ["Flask-CORS==4"],
        "test": ["pytest==8.*"],
    },
    include_package_data=True,
)
