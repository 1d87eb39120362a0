from cloudfs import filesystem_factory



def main():
    # Example usage of the filesystem factory
    cos_config = {
        "secret_id": "AKIDEXAMPLE",
        "secret_key": "EXAMPLEKEYwJalrXUtnFEMI",
        "bucket": "examplebucket-1250000000",
        "region": "ap-guangzhou",
        "base_url": "https://files.example.com",
        "sub_path": "uploads/",
    }

    fs = filesystem_factory("cos", cos_config)

    print(f"COS file system: {fs}")
    print(f"Public URL: {fs.build_url('uploads/readme.txt')}")
    print(f"Signed URL: {fs.build_presigned_url('uploads/readme.txt', expires=600)}")

if __name__ == "__main__":
    main()
