import json
import logging
import os

"""
Configuration file parsing.  A config file is a JSON (or, with pyyaml
installed, YAML) document with one dict per section, like:

    {"default": {"webdav_host": "dav.example.com", "webdav_port": 8080},
     "proxied": {"inherits": "default", "webdav_proxy_host": "proxy.example.com"}}
"""


def config_section(config, section="default"):
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    ret.pop("inherits", None)
    return ret


def read_config(fn):
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/rawdav/webdav.conf",
            f"{cfgdir}/rawdav/webdav.yaml",
            f"{cfgdir}/rawdav/webdav.json",
            f"{cfgdir}/webdav.conf",
            "/etc/webdav.conf",
            "/etc/rawdav/webdav.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        try:
            with open(fn, "rb") as config_file:
                return json.load(config_file)
        except json.decoder.JSONDecodeError:
            ## Late import, wrapped in try/except.  yaml is an optional dependency.
            try:
                import yaml

                try:
                    with open(fn, "rb") as config_file:
                        return yaml.load(config_file, yaml.SafeLoader)
                except yaml.YAMLError:
                    logging.error(
                        f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
                    )
            except ImportError:
                logging.error(
                    f"config file {fn} exists but is not valid json, and pyyaml is not installed."
                )

    except FileNotFoundError:
        logging.info("no config file found")
    except ValueError:
        logging.error("error in config file.  It will be ignored", exc_info=True)
    return {}
